"""Exceptions raised while compiling a schema file."""

from typing import Optional


class SchemaError(Exception):
    """Base class for schema compilation failures."""

    kind = "SchemaError"

    def __init__(self, message: str, location: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def locate(self, location: str) -> "SchemaError":
        """Attach a location unless a more specific one is already set."""
        if self.location is None:
            self.location = location
        return self

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class StructuralError(SchemaError, ValueError):
    """Raised when a document has the wrong shape."""

    kind = "StructuralError"


class SchemaNameError(SchemaError, ValueError):
    """Raised when an identifier does not match its required pattern."""

    kind = "NameError"


class SchemaTypeError(SchemaError, TypeError):
    """Raised for unknown kinds or tokens and non-integer numbers."""

    kind = "TypeError"


class SchemaRangeError(SchemaError, ValueError):
    """Raised when a number falls outside its allowed bounds."""

    kind = "RangeError"


class SchemaReferenceError(SchemaError, LookupError):
    """Raised for unresolved references and duplicate names or codes."""

    kind = "ReferenceError"
