"""Utilities for loading schema documents from JSON."""

import json
from pathlib import Path
from typing import List
from pydantic import TypeAdapter, ValidationError
from schemac.errors import SchemaError, SchemaTypeError, StructuralError
from schemac.ir.model import Database
from schemac.config.logging import get_logger

logger = get_logger(__name__)

_DOCUMENT = TypeAdapter(List[Database])

# Pydantic error types that mean "wrong kind of value" rather than "wrong shape"
_TYPE_ERRORS = {
    "union_tag_invalid",
    "literal_error",
    "int_type",
    "int_from_float",
    "bool_type",
    "string_type",
}


def _translate(exc: ValidationError) -> SchemaError:
    """Turn the first pydantic error into a schema error."""
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    if err["type"] == "union_tag_invalid":
        message = f"Unknown column type {err['input'].get('type')!r}"
    else:
        message = f"{err['msg']} (got {err.get('input')!r})"
    if err["type"] in _TYPE_ERRORS:
        return SchemaTypeError(message, location or None)
    return StructuralError(message, location or None)


def parse_schema(text: str) -> List[Database]:
    """
    Parse a schema document.

    Args:
        text: JSON text holding an array of database declarations

    Returns:
        Database declarations in document order

    Raises:
        StructuralError: If the text is not JSON or has the wrong shape
        SchemaTypeError: If a value has the wrong type or an unknown token
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StructuralError(f"Schema document is not valid JSON: {e}") from e

    try:
        return _DOCUMENT.validate_python(data)
    except ValidationError as e:
        raise _translate(e) from e


def load_schema_file(path: Path) -> List[Database]:
    """
    Load database declarations from a schema file.

    Args:
        path: Path to the `<name>.json` file

    Returns:
        Database declarations in document order

    Raises:
        FileNotFoundError: If the file does not exist
        StructuralError: If the file cannot be read as UTF-8 text, or via parse_schema
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    logger.debug(f"Loading schema document {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise StructuralError(f"Schema document is not valid UTF-8: {e}") from e
    except OSError as e:
        raise StructuralError(f"Schema document could not be read: {e}") from e
    return parse_schema(text)
