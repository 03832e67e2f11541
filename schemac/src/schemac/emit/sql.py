"""SQL DDL emitter."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from schemac.errors import SchemaTypeError
from schemac.ir.model import (
    BinaryColumn,
    BooleanColumn,
    CodeColumn,
    ConcreteColumn,
    Index,
    IntegerColumn,
    SerialColumn,
    StringColumn,
    TimestampColumn,
)
from schemac.compiler.resolver import ForeignKeyConstraint
from schemac.compiler.schema import CompiledDatabase, CompiledSchema, CompiledTable
from schemac.config.settings import get_settings

_INDEX_KEYWORDS = {
    "primary": "PRIMARY KEY",
    "unique": "UNIQUE",
    "index": "INDEX",
}


@dataclass(frozen=True)
class CreateDatabase:
    name: str
    charset: str
    collation: str

    def render(self) -> str:
        return (
            f"CREATE DATABASE {self.name} CHARACTER SET {self.charset} "
            f"COLLATE {self.collation};"
        )


@dataclass(frozen=True)
class UseDatabase:
    name: str

    def render(self) -> str:
        return f"USE {self.name};"


@dataclass(frozen=True)
class ColumnDefinition:
    name: str
    type_clause: str

    def render(self) -> str:
        return f"{self.name} {self.type_clause}"


@dataclass(frozen=True)
class CreateTable:
    name: str
    columns: List[ColumnDefinition]
    constraints: List[str] = field(default_factory=list)

    def render(self) -> str:
        lines = [c.render() for c in self.columns] + list(self.constraints)
        body = ",\n".join(f"  {line}" for line in lines)
        return f"CREATE TABLE {self.name} (\n{body}\n);"


def _clause(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


def _null(col: ConcreteColumn) -> str:
    return "NULL" if col.nullable else "NOT NULL"


def _default(value: Any) -> Optional[str]:
    return None if value is None else f"DEFAULT {value}"


def integer_clause(col: IntegerColumn) -> str:
    return _clause(
        col.size,
        "UNSIGNED" if col.unsigned else None,
        _null(col),
        "AUTO_INCREMENT" if col.auto_increment else None,
        _default(col.default_value),
    )


def serial_clause(col: SerialColumn) -> str:
    # A serial reached through an FK carries auto_increment=False
    return _clause(
        col.size,
        "UNSIGNED",
        _null(col),
        "AUTO_INCREMENT" if col.auto_increment else None,
        _default(col.default_value),
    )


def timestamp_clause(col: TimestampColumn) -> str:
    return _clause("BIGINT UNSIGNED", _null(col), _default(col.default_value))


def string_clause(col: StringColumn) -> str:
    return _clause(f"VARCHAR({col.max_length})", _null(col), _default(col.default_value))


def binary_clause(col: BinaryColumn) -> str:
    kind = "BINARY" if col.min_size == col.max_size else "VARBINARY"
    return _clause(f"{kind}({col.max_size})", _null(col), _default(col.default_value))


def boolean_clause(col: BooleanColumn) -> str:
    return _clause("TINYINT(1) UNSIGNED", _null(col), _default(col.default_value))


def code_clause(col: CodeColumn) -> str:
    return _clause("TINYINT UNSIGNED", _null(col), _default(col.default_value))


_TYPE_CLAUSES: Dict[str, Callable[[Any], str]] = {
    "integer": integer_clause,
    "serial": serial_clause,
    "timestamp": timestamp_clause,
    "string": string_clause,
    "binary": binary_clause,
    "boolean": boolean_clause,
    "code": code_clause,
}


def type_clause(col: ConcreteColumn) -> str:
    """Render the SQL type clause of a validated column."""
    render = _TYPE_CLAUSES.get(col.type)
    if render is None:
        raise SchemaTypeError(f"Unknown table column type {col.type!r}")
    return render(col)


def index_clause(idx: Index) -> str:
    return f"{_INDEX_KEYWORDS[idx.type]} ({','.join(idx.columns)})"


def foreign_key_clause(fk: ForeignKeyConstraint) -> str:
    target = f"{fk.database}.{fk.table}" if fk.cross_database else fk.table
    return (
        f"FOREIGN KEY ({fk.column}) REFERENCES {target} ({fk.target_column}) "
        f"ON DELETE {fk.ondelete}"
    )


def table_statement(table: CompiledTable) -> CreateTable:
    constraints = [index_clause(idx) for idx in table.indexes]
    constraints += [foreign_key_clause(fk) for fk in table.foreign_keys if fk.emits_constraint]
    return CreateTable(
        name=table.name,
        columns=[ColumnDefinition(c.name, type_clause(c)) for c in table.columns],
        constraints=constraints,
    )


def database_statements(database: CompiledDatabase) -> List[Any]:
    """
    Build the ordered statements creating one database.

    Args:
        database: Compiled database

    Returns:
        CREATE DATABASE, USE and one CREATE TABLE per table, in order
    """
    settings = get_settings()
    statements: List[Any] = [
        CreateDatabase(database.name, settings.sql_charset, settings.sql_collation),
        UseDatabase(database.name),
    ]
    statements.extend(table_statement(t) for t in database.tables)
    return statements


def render_database(database: CompiledDatabase) -> str:
    """Render one database as a SQL script."""
    return "\n\n".join(s.render() for s in database_statements(database)) + "\n"


def render_schema(schema: CompiledSchema) -> Dict[str, str]:
    """Render every database of a schema, keyed by database name in declaration order."""
    return {db.name: render_database(db) for db in schema.databases}
