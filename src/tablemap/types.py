"""Record and Field types for tablemap."""

from __future__ import annotations

import inspect
import sys
from typing import Any, ClassVar, Generic, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, create_model

T = TypeVar("T")

_SENTINEL = object()

# Zero values of the scalar kinds that can be mapped to a column.
SCALAR_ZERO: dict[type, Any] = {str: "", bool: False, int: 0, float: 0.0}


class Field(Generic[T]):
    """Field declaration for Record schemas.

    ``column`` names the table column (defaults to the attribute name) and
    ``options`` is a comma-separated list of ``auto``, ``id``, ``created``,
    ``modified`` and ``skip``. ``embedded=True`` marks a sub-record whose
    fields are mapped into the same table.
    """

    def __init__(
        self,
        default: Any = _SENTINEL,
        *,
        default_factory: Any | None = None,
        column: str = "",
        options: str = "",
        embedded: bool = False,
    ) -> None:
        self.default = default
        self.default_factory = default_factory
        self.column = column
        self.options = options
        self.embedded = embedded
        self.name: str = ""
        self.annotation: Any = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        try:
            return obj.__dict__[self.name]
        except KeyError:
            raise AttributeError(
                f"'{type(obj).__name__}' object has no value for field '{self.name}'"
            ) from None

    def __set__(self, obj: Any, value: Any) -> None:
        obj.__dict__[self.name] = value

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, column={self.column!r}, options={self.options!r})"

    def has_default(self) -> bool:
        return self.default is not _SENTINEL or self.default_factory is not None

    def get_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not _SENTINEL:
            return self.default
        raise ValueError(f"Field '{self.name}' has no default")

    def zero_value(self) -> Any:
        """Default if declared, otherwise the zero value of the field's kind."""
        if self.has_default():
            value = self.get_default()
            if isinstance(value, Record):
                return value._copy()
            return value
        if self.annotation in SCALAR_ZERO:
            return SCALAR_ZERO[self.annotation]
        if is_record_type(self.annotation):
            return self.annotation._blank()
        return None


def is_record_type(obj: Any) -> bool:
    return isinstance(obj, type) and issubclass(obj, Record) and obj is not Record


def _resolve_annotation(ann: Any, module_name: str) -> Any:
    """Resolve string annotations and extract the inner type from Field[T]."""
    if isinstance(ann, str):
        module = sys.modules.get(module_name, None)
        ns = vars(module) if module else {}
        try:
            ann = eval(ann, ns)  # noqa: S307
        except Exception:
            return Any

    origin = getattr(ann, "__origin__", None)
    if origin is Field:
        args = get_args(ann)
        return args[0] if args else Any
    return ann


def _collect_fields(cls: type) -> dict[str, Field[Any]]:
    """Collect Field descriptors from class annotations, in declaration order."""
    fields: dict[str, Field[Any]] = {}

    annotations = inspect.get_annotations(cls)

    for name, ann in annotations.items():
        resolved = _resolve_annotation(ann, cls.__module__)

        origin = getattr(ann, "__origin__", None)
        is_field_ann = origin is Field
        if isinstance(ann, str) and ann.startswith("Field"):
            is_field_ann = True

        if not is_field_ann:
            continue

        val = cls.__dict__.get(name, _SENTINEL)

        field_desc: Field[Any]
        if isinstance(val, Field):
            field_desc = val
        elif val is _SENTINEL:
            field_desc = Field()
        else:
            field_desc = Field(default=val)

        field_desc.name = name
        field_desc.annotation = resolved
        fields[name] = field_desc

        if not isinstance(cls.__dict__.get(name), Field):
            setattr(cls, name, field_desc)

    return fields


def _build_pydantic_model(model_name: str, fields: dict[str, Field[Any]]) -> type[BaseModel]:
    """Build a Pydantic model from Field definitions.

    Fields without a default fall back to the zero value of their kind, so a
    record can always be created empty and filled in afterwards.
    """
    from pydantic import Field as PydanticField

    pydantic_fields: dict[str, Any] = {}
    for name, f in fields.items():
        if name.startswith("_"):
            continue
        ann = f.annotation if f.annotation is not None else Any
        if f.default_factory is not None:
            pydantic_fields[name] = (ann, PydanticField(default_factory=f.default_factory))
        elif isinstance(f.default, Record):
            pydantic_fields[name] = (ann, PydanticField(default_factory=f.zero_value))
        elif f.default is not _SENTINEL:
            pydantic_fields[name] = (ann, f.default)
        elif ann in SCALAR_ZERO:
            pydantic_fields[name] = (ann, SCALAR_ZERO[ann])
        elif is_record_type(ann):
            pydantic_fields[name] = (ann, PydanticField(default_factory=ann))
        else:
            pydantic_fields[name] = (ann, ...)

    return create_model(  # type: ignore[call-overload]
        model_name,
        __config__=ConfigDict(arbitrary_types_allowed=True),
        **pydantic_fields,
    )


class Record:
    """Base class for typed records mapped to table rows."""

    __record_fields__: ClassVar[tuple[str, ...]] = ()
    _pydantic_model: ClassVar[type[BaseModel]]
    _field_definitions: ClassVar[dict[str, Field[Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        fields = _collect_fields(cls)
        cls._field_definitions = fields
        cls.__record_fields__ = tuple(fields.keys())
        cls._pydantic_model = _build_pydantic_model(f"_{cls.__name__}Model", fields)

    def __init__(self, **data: Any) -> None:
        # pydantic rejects private names, so unexported fields bypass validation
        private = {k: data.pop(k) for k in list(data) if k.startswith("_")}
        validated = self._pydantic_model(**data)
        for name, f in self._field_definitions.items():
            if name.startswith("_"):
                setattr(self, name, private.get(name, f.zero_value()))
            else:
                setattr(self, name, getattr(validated, name))

    @classmethod
    def _blank(cls) -> Any:
        """Create a zero-valued instance without running validation."""
        obj = cls.__new__(cls)
        for name, f in cls._field_definitions.items():
            setattr(obj, name, f.zero_value())
        return obj

    def _copy(self) -> Any:
        """Copy of this record with its embedded sub-records copied too."""
        obj = self.__class__.__new__(self.__class__)
        for name in self._field_definitions:
            value = getattr(self, name)
            if isinstance(value, Record):
                value = value._copy()
            setattr(obj, name, value)
        return obj

    def model_dump(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.__record_fields__}

    @classmethod
    def model_validate(cls, data: dict[str, Any]) -> Any:
        return cls(**data)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={getattr(self, k)!r}" for k in self.__record_fields__)
        return f"{self.__class__.__name__}({fields})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.model_dump() == other.model_dump()
