"""Lua descriptor emitter.

The descriptor is a Lua module returning a frozen `Schema` table:

    Schema.core / Schema.inst          databases ("fixed" / "instance")
    Schema.core.<table>                tables
    Schema.core.<table>.<column>       flat column records

Every object carries `_objectType` and a name, columns point back to their
table through `_parentTable`, and code columns also map NAME -> code,
code -> NAME and expose `codes` as a `Set`. Every object gets the frozen
metatable, so writes fail in the consuming runtime.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union
from schemac.errors import StructuralError
from schemac.ir.model import CodeColumn, ConcreteColumn
from schemac.compiler.columns import build_code_domain
from schemac.compiler.schema import CompiledDatabase, CompiledSchema, CompiledTable
from schemac.config.settings import get_settings

LUA_KEYWORDS = frozenset(
    """
    and break do else elseif end false for function goto if in local nil not
    or repeat return then true until while
    """.split()
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_INTEGER_KEY = re.compile(r"^[0-9]+$")

ROOT = "Schema"
NAMESPACES = (("core", "fixed"), ("inst", "instance"))

Key = Union[str, int]


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name)) and name not in LUA_KEYWORDS


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def render_path(keys: Sequence[Key]) -> str:
    """Render `Schema.a.b[1]["end"]` style paths."""
    out = ROOT
    for key in keys:
        if isinstance(key, int):
            out += f"[{key}]"
        elif is_identifier(key):
            out += f".{key}"
        else:
            out += f"[{quote(key)}]"
    return out


def render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    raise StructuralError(
        f"Detected nested object within column object ({type(value).__name__})"
    )


def render_record(record: Dict[str, Any]) -> str:
    """
    Render a flat record as a Lua table constructor.

    None values are skipped (nil); lists, dicts and other composites raise
    StructuralError because records must stay flat.
    """
    fields = []
    for key, value in record.items():
        if value is None:
            continue
        if _INTEGER_KEY.match(key):
            lua_key = f"[{int(key)}]"
        elif is_identifier(key):
            lua_key = key
        else:
            lua_key = f"[{quote(key)}]"
        fields.append(f"{lua_key}={render_value(value)}")
    return "{" + ",".join(fields) + "}"


@dataclass(frozen=True)
class Local:
    name: str
    expression: str

    def render(self) -> str:
        return f"local {self.name}={self.expression}"


@dataclass(frozen=True)
class Assign:
    path: Sequence[Key]
    expression: str

    def render(self) -> str:
        return f"{render_path(self.path)}={self.expression}"


@dataclass(frozen=True)
class Freeze:
    path: Sequence[Key]

    def render(self) -> str:
        return f"setmetatable({render_path(self.path)},FrozenTableMetatable)"


@dataclass(frozen=True)
class Return:
    def render(self) -> str:
        return f"return {ROOT}"


Statement = Union[Local, Assign, Freeze, Return]


def column_record(
    col: ConcreteColumn, references: Optional[str] = None
) -> Dict[str, Any]:
    """Flat descriptor record of a validated column."""
    record = col.model_dump(by_alias=True, exclude={"values"})
    if references is not None:
        record["references"] = references
    record["_objectType"] = "column"
    return record


def column_statements(namespace: str, table: CompiledTable, col: ConcreteColumn) -> List[Statement]:
    path = (namespace, table.name, col.name)
    fk = table.foreign_key_for(col.name)
    record = column_record(col, fk.reference if fk else None)
    statements: List[Statement] = [
        Assign(path, render_record(record)),
        Assign(path + ("_parentTable",), render_path((namespace, table.name))),
    ]
    if isinstance(col, CodeColumn):
        domain = build_code_domain(col)
        for name, code in domain.by_name.items():
            statements.append(Assign(path + (name,), str(code)))
            statements.append(Assign(path + (code,), quote(name)))
        codes = ",".join(str(code) for code in domain.codes)
        statements.append(Assign(path + ("codes",), f"Set:new({{{codes}}})"))
    statements.append(Freeze(path))
    return statements


def table_statements(namespace: str, table: CompiledTable) -> List[Statement]:
    path = (namespace, table.name)
    statements: List[Statement] = [
        Assign(path, "{}"),
        Assign(path + ("_objectType",), quote("table")),
        Assign(path + ("_objectName",), quote(table.name)),
    ]
    for col in table.columns:
        statements.extend(column_statements(namespace, table, col))
    statements.append(Freeze(path))
    return statements


def schema_statements(schema: CompiledSchema) -> List[Statement]:
    """
    Build the ordered statements of a descriptor module.

    Args:
        schema: Compiled schema (one core and/or one instance database)

    Returns:
        Statements in source declaration order
    """
    settings = get_settings()
    statements: List[Statement] = [
        Local("FrozenTableMetatable", f"require({quote(settings.lua_frozen_metatable_module)})"),
        Local("Set", f"require({quote(settings.lua_set_module)})"),
        Local(ROOT, "{}"),
    ]

    databases: Dict[str, CompiledDatabase] = {}
    for namespace, db_type in NAMESPACES:
        db = next((d for d in schema.databases if d.type == db_type), None)
        if db is None:
            continue
        databases[namespace] = db
        statements += [
            Assign((namespace,), "{}"),
            Assign((namespace, "_objectType"), quote("database")),
            Assign((namespace, "_objectName"), quote(db.name)),
        ]

    for namespace, db in databases.items():
        for table in db.tables:
            statements.extend(table_statements(namespace, table))
        statements.append(Freeze((namespace,)))

    statements += [Freeze(()), Return()]
    return statements


def render_schema(schema: CompiledSchema) -> str:
    """Render a compiled schema as a minified Lua module."""
    return " ".join(s.render() for s in schema_statements(schema)) + "\n"
