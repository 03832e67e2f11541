"""Validated schema model shared by the SQL and Lua emitters."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from schemac.errors import (
    SchemaError,
    SchemaNameError,
    SchemaReferenceError,
    SchemaTypeError,
    StructuralError,
)
from schemac.ir.model import ConcreteColumn, Database, ForeignKeyColumn, Index, Table
from schemac.compiler.columns import validate_column
from schemac.compiler.resolver import ForeignKeyConstraint, resolve_foreign_key
from schemac.compiler.constants import (
    COLUMN_NAME_PATTERN,
    DATABASE_NAME_PATTERN,
    SUPPORTED_TABLE_TYPES,
    TABLE_NAME_PATTERN,
)
from schemac.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompiledTable:
    """Table whose columns are concrete and validated."""

    name: str
    columns: List[ConcreteColumn]
    indexes: List[Index] = field(default_factory=list)
    foreign_keys: List[ForeignKeyConstraint] = field(default_factory=list)

    def foreign_key_for(self, column_name: str) -> Optional[ForeignKeyConstraint]:
        return next((fk for fk in self.foreign_keys if fk.column == column_name), None)


@dataclass(frozen=True)
class CompiledDatabase:
    name: str
    type: str
    tables: List[CompiledTable]


@dataclass(frozen=True)
class CompiledSchema:
    """All databases of one schema file, validated."""

    databases: List[CompiledDatabase]

    @property
    def core(self) -> Optional[CompiledDatabase]:
        return next((db for db in self.databases if db.type == "fixed"), None)

    @property
    def instance(self) -> Optional[CompiledDatabase]:
        return next((db for db in self.databases if db.type == "instance"), None)


def _check_databases(databases: Sequence[Database]) -> None:
    if len(databases) < 1 or len(databases) > 2:
        raise StructuralError(
            f"Invalid amount of databases: expected 1 or 2, got {len(databases)}"
        )

    seen_types: Dict[str, str] = {}
    seen_names = set()
    for db in databases:
        if not DATABASE_NAME_PATTERN.match(db.name):
            raise SchemaNameError(f"Invalid database name {db.name!r}")
        if db.name in seen_names:
            raise StructuralError(f"Duplicate database name {db.name!r}")
        if db.type in seen_types:
            raise StructuralError(
                f"Databases {seen_types[db.type]!r} and {db.name!r} are both of type {db.type!r}"
            )
        seen_names.add(db.name)
        seen_types[db.type] = db.name


def _check_indexes(table: Table, column_names: Sequence[str]) -> None:
    for idx in table.indexes:
        if not idx.columns:
            raise StructuralError(f"Index of type {idx.type!r} has no columns")
        for name in idx.columns:
            if name not in column_names:
                raise SchemaReferenceError(
                    f"Index of type {idx.type!r} references unknown column {name!r}"
                )


def compile_table(
    table: Table, database: Database, databases: Sequence[Database]
) -> CompiledTable:
    """
    Validate one table and resolve its foreign keys.

    Args:
        table: Table declaration
        database: Database that declares the table
        databases: All databases of the schema file (FK targets)

    Returns:
        CompiledTable with concrete columns in declaration order
    """
    location = f"{database.name}.{table.name}"
    if not TABLE_NAME_PATTERN.match(table.name):
        raise SchemaNameError(f"Invalid table name {table.name!r}", location)
    if table.type not in SUPPORTED_TABLE_TYPES:
        raise SchemaTypeError(
            f"Table type {table.type!r} is not supported yet", location
        )

    columns: List[ConcreteColumn] = []
    foreign_keys: List[ForeignKeyConstraint] = []
    seen = set()
    for col in table.columns:
        column_location = f"{location}.{col.name}"
        try:
            if not COLUMN_NAME_PATTERN.match(col.name):
                raise SchemaNameError(
                    f"Invalid table column name {col.name!r} in table {table.name!r}"
                )
            if col.name in seen:
                raise SchemaReferenceError(f"Duplicate column name {col.name!r}")
            seen.add(col.name)

            if isinstance(col, ForeignKeyColumn):
                resolved = resolve_foreign_key(col, database, databases)
                columns.append(resolved.column)
                foreign_keys.append(resolved.constraint)
            else:
                columns.append(validate_column(col))
        except SchemaError as e:
            raise e.locate(column_location)

    try:
        _check_indexes(table, [c.name for c in columns])
    except SchemaError as e:
        raise e.locate(location)

    logger.debug(
        f"Compiled table {location}: {len(columns)} column(s), "
        f"{len(table.indexes)} index(es), {len(foreign_keys)} foreign key(s)"
    )
    return CompiledTable(
        name=table.name,
        columns=columns,
        indexes=list(table.indexes),
        foreign_keys=foreign_keys,
    )


def compile_schema(databases: Sequence[Database]) -> CompiledSchema:
    """
    Validate every database of a schema file.

    Nothing is emitted until this returns; the first error aborts the file.

    Args:
        databases: Declarations loaded from one schema file

    Returns:
        CompiledSchema in declaration order

    Raises:
        SchemaError: The first violation found
    """
    _check_databases(databases)

    compiled = []
    for db in databases:
        seen_tables = set()
        tables = []
        for table in db.tables:
            if table.name in seen_tables:
                raise SchemaReferenceError(
                    f"Duplicate table name {table.name!r}", f"{db.name}.{table.name}"
                )
            seen_tables.add(table.name)
            tables.append(compile_table(table, db, databases))
        compiled.append(CompiledDatabase(name=db.name, type=db.type, tables=tables))
        logger.debug(f"Compiled database {db.name!r} ({db.type}) with {len(tables)} table(s)")

    return CompiledSchema(databases=compiled)
