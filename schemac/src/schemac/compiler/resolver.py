"""Foreign-key resolution against the databases of one schema file."""

from dataclasses import dataclass
from typing import Optional, Sequence, Union
from schemac.errors import SchemaReferenceError, SchemaTypeError
from schemac.ir.model import CodeColumn, Database, ForeignKeyColumn, IntegerColumn, SerialColumn, Table
from schemac.compiler.columns import is_safe_integer, validate_code, validate_column, validate_integer
from schemac.compiler.constants import INTEGER_MAX_UNSIGNED, ON_DELETE_ACTIONS
from schemac.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ForeignKeyConstraint:
    """A resolved reference from one column to another."""

    column: str
    database: str
    table: str
    target_column: str
    ondelete: Optional[str] = None
    cross_database: bool = False

    @property
    def reference(self) -> str:
        """Fully qualified target path."""
        return f"{self.database}.{self.table}.{self.target_column}"

    @property
    def emits_constraint(self) -> bool:
        """Only an explicit action other than NO ACTION produces a SQL constraint."""
        return self.ondelete is not None and self.ondelete != "NO ACTION"


@dataclass(frozen=True)
class ResolvedForeignKey:
    column: Union[IntegerColumn, SerialColumn]
    constraint: ForeignKeyConstraint


def _find_table(database: Database, name: str) -> Optional[Table]:
    return next((t for t in database.tables if t.name == name), None)


def _normalize_ondelete(action: Optional[str]) -> Optional[str]:
    if action is None:
        return None
    normalized = " ".join(action.upper().split())
    if normalized not in ON_DELETE_ACTIONS:
        raise SchemaTypeError(
            f"FK column has unknown ondelete action {action!r} "
            f"(expected one of {', '.join(ON_DELETE_ACTIONS)})"
        )
    return normalized


def resolve_foreign_key(
    fk: ForeignKeyColumn, database: Database, databases: Sequence[Database]
) -> ResolvedForeignKey:
    """
    Rewrite an FK declaration into the concrete column it stands for.

    The reference path is "table.column" (same database) or
    "database.table.column". The result keeps the target's kind (integer or
    serial) and bounds without auto-increment, with the declaration's own
    name, nullability and default. Code targets lose their enumeration and
    become plain unsigned TINYINT integers.

    Args:
        fk: The FK column declaration
        database: Database declaring the FK column
        databases: All databases of the schema file

    Returns:
        ResolvedForeignKey with the concrete column and its constraint

    Raises:
        SchemaReferenceError: If the path is malformed, a target is missing
            or the target column is nullable
        SchemaTypeError: If the target kind cannot be referenced
    """
    parts = fk.column.split(".")
    if len(parts) not in (2, 3) or not all(parts):
        raise SchemaReferenceError(
            f"FK reference {fk.column!r} must be of the form [database.]table.column"
        )

    if len(parts) == 3:
        db_name, table_name, column_name = parts
        target_db = next((db for db in databases if db.name == db_name), None)
        if target_db is None:
            raise SchemaReferenceError(f"FK reference {fk.column!r} names unknown database {db_name!r}")
    else:
        table_name, column_name = parts
        target_db = database

    target_table = _find_table(target_db, table_name)
    if target_table is None:
        raise SchemaReferenceError(f"FK reference {fk.column!r} names unknown table {table_name!r}")

    target = next((c for c in target_table.columns if c.name == column_name), None)
    if target is None:
        raise SchemaReferenceError(f"FK reference {fk.column!r} names unknown column {column_name!r}")

    if target.nullable:
        raise SchemaReferenceError(
            f"FK reference column {fk.column!r} is nullable, not suitable for FK reference"
        )

    if target.type in ("integer", "serial"):
        resolved_target = validate_column(target)
        size = resolved_target.size
        unsigned = resolved_target.unsigned
        minimum, maximum = resolved_target.min_value, resolved_target.max_value
    elif isinstance(target, CodeColumn):
        validate_code(target)
        size, unsigned = "TINYINT", True
        minimum, maximum = 0, INTEGER_MAX_UNSIGNED["TINYINT"]
    else:
        raise SchemaTypeError(
            f"FK reference column {fk.column!r} has type {target.type!r}, not suitable as FK reference"
        )

    if fk.default_value is not None and not is_safe_integer(fk.default_value):
        raise SchemaTypeError(f"Invalid FK default value {fk.default_value!r}")

    # Checks the FK's own default against the inherited bounds
    column = validate_integer(
        IntegerColumn(
            name=fk.name,
            nullable=fk.nullable,
            default_value=fk.default_value,
            size=size,
            unsigned=unsigned,
            auto_increment=False,
            min_value=minimum,
            max_value=maximum,
        )
    )
    if isinstance(target, SerialColumn):
        column = resolved_target.model_copy(
            update={
                "name": fk.name,
                "nullable": fk.nullable,
                "default_value": fk.default_value,
                "auto_increment": False,
            }
        )
    constraint = ForeignKeyConstraint(
        column=fk.name,
        database=target_db.name,
        table=target_table.name,
        target_column=target.name,
        ondelete=_normalize_ondelete(fk.ondelete),
        cross_database=target_db.name != database.name,
    )
    logger.debug(f"Resolved FK {fk.name} -> {constraint.reference} [{minimum}, {maximum}]")
    return ResolvedForeignKey(column=column, constraint=constraint)
