"""Validation and normalization rules, one per column kind."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple
from schemac.errors import (
    SchemaNameError,
    SchemaRangeError,
    SchemaReferenceError,
    SchemaTypeError,
    StructuralError,
)
from schemac.ir.model import (
    BinaryColumn,
    BooleanColumn,
    CodeColumn,
    ConcreteColumn,
    IntegerColumn,
    SerialColumn,
    StringColumn,
    TimestampColumn,
)
from schemac.compiler.constants import (
    CODE_NAME_PATTERN,
    EMPTY_STRING_LITERALS,
    HEX_LITERAL_PATTERN,
    INTEGER_MAX_SIGNED,
    INTEGER_MAX_UNSIGNED,
    INTEGER_MIN_SIGNED,
    INTEGER_SIZES,
    MAX_CODE,
    MAX_SAFE_INTEGER,
)


def is_safe_integer(value: Any) -> bool:
    """True for ints (not bools) that a double represents exactly."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER
    )


def integer_bounds(size: str, unsigned: bool) -> Tuple[int, int]:
    """
    Absolute bounds of an integer size.

    Args:
        size: One of TINYINT, SMALLINT, MEDIUMINT, INT, BIGINT
        unsigned: Whether the column is unsigned

    Returns:
        (minimum, maximum) tuple

    Raises:
        SchemaTypeError: If the size token is unknown
    """
    if size not in INTEGER_SIZES:
        raise SchemaTypeError(f"Integer column has invalid size {size!r}")
    if unsigned:
        return 0, INTEGER_MAX_UNSIGNED[size]
    return INTEGER_MIN_SIGNED[size], INTEGER_MAX_SIGNED[size]


def validate_integer(col: IntegerColumn) -> IntegerColumn:
    abs_min, abs_max = integer_bounds(col.size, col.unsigned)

    minimum = col.min_value
    if minimum is not None:
        if minimum < abs_min or minimum > abs_max:
            raise SchemaRangeError(
                f"Integer column has out-of-range minimum value {minimum} "
                f"(allowed {abs_min}..{abs_max})"
            )
    elif col.auto_increment:
        minimum = 1
    else:
        minimum = abs_min

    maximum = col.max_value
    if maximum is not None:
        if maximum < abs_min or maximum > abs_max:
            raise SchemaRangeError(
                f"Integer column has out-of-range maximum value {maximum} "
                f"(allowed {abs_min}..{abs_max})"
            )
    else:
        maximum = abs_max

    if minimum > maximum:
        raise SchemaRangeError(
            f"Integer column minimum value {minimum} exceeds maximum value {maximum}"
        )

    default = col.default_value
    if default is not None:
        if not is_safe_integer(default):
            raise SchemaTypeError(f"Integer column has non-integer default value {default!r}")
        if default < minimum or default > maximum:
            raise SchemaRangeError(
                f"Integer column has out-of-range default value {default} "
                f"(allowed {minimum}..{maximum})"
            )

    return col.model_copy(update={"min_value": minimum, "max_value": maximum})


def validate_serial(col: SerialColumn) -> SerialColumn:
    if col.size not in INTEGER_SIZES:
        raise SchemaTypeError(f"Serial column has invalid size {col.size!r}")
    return col.model_copy(
        update={
            "nullable": False,
            "default_value": None,
            "unsigned": True,
            "auto_increment": True,
            "min_value": 1,
            "max_value": INTEGER_MAX_UNSIGNED[col.size],
        }
    )


def validate_timestamp(col: TimestampColumn) -> TimestampColumn:
    default = col.default_value
    if default is not None:
        if not col.unsigned:
            raise SchemaTypeError("Default values for signed timestamps are not allowed")
        if not is_safe_integer(default) or default != 0:
            raise SchemaRangeError(f"Timestamp column has non-zero default value {default!r}")
    return col


def _check_length_pair(kind: str, what: str, minimum: Any, maximum: Any) -> None:
    if not is_safe_integer(maximum):
        raise SchemaTypeError(f"{kind} column has non-integer maximum {what} {maximum!r}")
    if maximum < 1:
        raise SchemaRangeError(f"{kind} column has non-positive maximum {what} {maximum}")
    if minimum is None:
        return
    if not is_safe_integer(minimum):
        raise SchemaTypeError(f"{kind} column has non-integer minimum {what} {minimum!r}")
    if minimum < 1 or minimum > maximum:
        raise SchemaRangeError(
            f"{kind} column has out-of-range minimum {what} {minimum} (allowed 1..{maximum})"
        )


def validate_string(col: StringColumn) -> StringColumn:
    _check_length_pair("String", "length", col.min_length, col.max_length)

    default = col.default_value
    if default is not None:
        if default not in EMPTY_STRING_LITERALS:
            raise SchemaTypeError(
                f"String column has non-empty literal string default value {default!r}"
            )
        return col.model_copy(update={"default_value": "''"})
    return col


def validate_binary(col: BinaryColumn) -> BinaryColumn:
    _check_length_pair("Binary", "size", col.min_size, col.max_size)
    updates: Dict[str, Any] = {}
    if col.min_size is None:
        updates["min_size"] = 0

    default = col.default_value
    if default is not None:
        if not isinstance(default, str):
            raise SchemaTypeError(f"Invalid default value for binary column {default!r}")
        if default in EMPTY_STRING_LITERALS:
            updates["default_value"] = "''"
        elif not HEX_LITERAL_PATTERN.match(default):
            raise SchemaTypeError(f"Invalid default value for binary column {default!r}")

    return col.model_copy(update=updates) if updates else col


def validate_boolean(col: BooleanColumn) -> BooleanColumn:
    default = col.default_value
    if default is not None and not (is_safe_integer(default) and default in (0, 1)):
        raise SchemaTypeError(f"Boolean column has invalid default value {default!r}")
    return col


def validate_code(col: CodeColumn) -> CodeColumn:
    if not col.values:
        raise StructuralError("Code column has no values")

    codes = set()
    names = set()
    highest = 0
    for value in col.values:
        if value.code < 0:
            raise SchemaRangeError(f"Code column has negative value code {value.code}")
        if not CODE_NAME_PATTERN.match(value.value):
            raise SchemaNameError(f"Code column has invalid value name {value.value!r}")
        if value.code in codes:
            raise SchemaReferenceError(f"Code column contains duplicate value code {value.code}")
        if value.value in names:
            raise SchemaReferenceError(
                f"Code column contains duplicate value name {value.value!r}"
            )
        codes.add(value.code)
        names.add(value.value)
        highest = max(highest, value.code)

    if highest > MAX_CODE:
        raise SchemaRangeError(f"Code column contains too large value code {highest}")

    default = col.default_value
    if default is not None and not (is_safe_integer(default) and default in codes):
        raise SchemaReferenceError(f"Code column has unknown default value {default!r}")

    return col


_VALIDATORS: Dict[str, Callable[[Any], ConcreteColumn]] = {
    "integer": validate_integer,
    "serial": validate_serial,
    "timestamp": validate_timestamp,
    "string": validate_string,
    "binary": validate_binary,
    "boolean": validate_boolean,
    "code": validate_code,
}


def validate_column(col: Any) -> ConcreteColumn:
    """
    Validate a concrete column and return its normalized copy.

    Foreign keys are not concrete; resolve them with
    `schemac.compiler.resolver.resolve_foreign_key` instead.

    Raises:
        SchemaTypeError: If the column kind is unknown or unresolved
    """
    validator = _VALIDATORS.get(col.type)
    if validator is None:
        raise SchemaTypeError(f"Unknown table column type {col.type!r}")
    return validator(col)


@dataclass(frozen=True)
class CodeDomain:
    """Name/code lookups of a code column."""

    by_name: Dict[str, int]
    by_code: Dict[int, str]
    codes: Tuple[int, ...]


def build_code_domain(col: CodeColumn) -> CodeDomain:
    """Build the two-way lookup of a validated code column, in declaration order."""
    return CodeDomain(
        by_name={v.value: v.code for v in col.values},
        by_code={v.code: v.value for v in col.values},
        codes=tuple(v.code for v in col.values),
    )
