"""Tests for tablemap inspect."""

import json

from tests.cli.conftest import invoke


def test_inspect_text(runner):
    result = invoke(
        runner, ["inspect", "--models", "tests.conftest", "--type", "Account", "--table", "accounts"]
    )
    assert result.exit_code == 0
    assert "Account -> accounts (sqlite)" in result.output
    assert "details.text" in result.output
    assert "insert: INSERT INTO accounts(b, c, m, text) VALUES(?, ?, ?, ?)" in result.output
    assert "params: b, m, text, id" in result.output


def test_inspect_json_postgresql(runner):
    result = invoke(
        runner,
        [
            "--json",
            "inspect",
            "--models",
            "tests.conftest",
            "--type",
            "Account",
            "--table",
            "accounts",
            "--dialect",
            "postgresql",
        ],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["num_field"] == 5
    assert data["num_field_auto"] == 1
    assert data["columns"][0] == {"column": "id", "path": "id", "kind": "int", "roles": "id,auto"}
    insert = data["statements"]["insert"]
    assert insert["query"] == "INSERT INTO accounts(b, c, m, text) VALUES($1, $2, $3, $4) RETURNING id"
    assert insert["params"] == ["b", "c", "m", "text"]
    assert data["statements"]["delete"]["query"] == "DELETE FROM accounts WHERE id = $1"


def test_inspect_models_path(runner, tmp_path):
    models = tmp_path / "inspect_models.py"
    models.write_text(
        "from tablemap import Field, Record\n"
        "\n"
        "class Item(Record):\n"
        "    id: Field[int] = Field(options='id,auto')\n"
        "    label: Field[str]\n"
    )
    result = invoke(
        runner,
        ["--json", "inspect", "--models-path", str(models), "--type", "Item", "--table", "items"],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["statements"]["insert"]["params"] == ["label"]


def test_inspect_declaration_error(runner, tmp_path):
    models = tmp_path / "broken_models.py"
    models.write_text(
        "from tablemap import Field, Record\n"
        "\n"
        "class NoId(Record):\n"
        "    label: Field[str]\n"
    )
    result = invoke(
        runner, ["inspect", "--models-path", str(models), "--type", "NoId", "--table", "t"]
    )
    assert result.exit_code == 3


def test_inspect_unknown_type(runner):
    result = invoke(
        runner, ["inspect", "--models", "tests.conftest", "--type", "Missing", "--table", "t"]
    )
    assert result.exit_code == 2


def test_inspect_requires_models(runner):
    result = invoke(runner, ["inspect", "--type", "Account", "--table", "t"])
    assert result.exit_code == 2


def test_inspect_unknown_dialect(runner):
    result = invoke(
        runner,
        [
            "inspect",
            "--models",
            "tests.conftest",
            "--type",
            "Account",
            "--table",
            "t",
            "--dialect",
            "oracle",
        ],
    )
    assert result.exit_code == 2


def test_inspect_bad_module(runner):
    result = invoke(
        runner, ["inspect", "--models", "tests.no_such_module", "--type", "A", "--table", "t"]
    )
    assert result.exit_code == 1
