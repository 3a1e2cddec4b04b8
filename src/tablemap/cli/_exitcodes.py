"""Process exit codes for the tablemap CLI."""

OK = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
MAPPING_ERROR = 3
