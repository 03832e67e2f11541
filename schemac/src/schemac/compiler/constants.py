"""Constants for schema compilation."""

import re

INTEGER_SIZES = ("TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT")

# BIGINT is capped at 99999999999999 in both signednesses: it is the largest
# magnitude the descriptor runtime's number type represents exactly.
BIGINT_CEILING = 99999999999999

INTEGER_MIN_SIGNED = {
    "TINYINT": -128,
    "SMALLINT": -32768,
    "MEDIUMINT": -8388608,
    "INT": -2147483648,
    "BIGINT": -BIGINT_CEILING,
}

INTEGER_MAX_SIGNED = {
    "TINYINT": 127,
    "SMALLINT": 32767,
    "MEDIUMINT": 8388607,
    "INT": 2147483647,
    "BIGINT": BIGINT_CEILING,
}

INTEGER_MAX_UNSIGNED = {
    "TINYINT": 255,
    "SMALLINT": 65535,
    "MEDIUMINT": 16777215,
    "INT": 4294967295,
    "BIGINT": BIGINT_CEILING,
}

# Largest integer a double holds exactly (JavaScript's Number.MAX_SAFE_INTEGER)
MAX_SAFE_INTEGER = 2**53 - 1

MAX_CODE = 255

# Identifier patterns
DATABASE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
TABLE_NAME_PATTERN = re.compile(r"^[a-z_]+$")
COLUMN_NAME_PATTERN = re.compile(r"^[a-z][a-zA-Z0-9]+$")
CODE_NAME_PATTERN = re.compile(r"^[A-Z0-9_]+$")
SCHEMA_NAME_PATTERN = re.compile(r"^[a-z0-9\-_.]{1,100}$")

HEX_LITERAL_PATTERN = re.compile(r"^0x[0-9a-fA-F]+$")
EMPTY_STRING_LITERALS = ("''", '""')

ON_DELETE_ACTIONS = ("CASCADE", "SET NULL", "SET DEFAULT", "RESTRICT", "NO ACTION")

SUPPORTED_TABLE_TYPES = ("fixed",)
