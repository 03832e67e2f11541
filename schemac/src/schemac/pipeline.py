"""Schema file → SQL / Lua compilation pipeline."""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Literal
from schemac.errors import SchemaError
from schemac.ir.loader import load_schema_file
from schemac.compiler.schema import CompiledSchema, compile_schema
from schemac.emit import lua, sql
from schemac.store import SchemaStore
from schemac.utils.files import write_all_atomic
from schemac.config.logging import get_logger, schema_context

logger = get_logger(__name__)

Target = Literal["sql", "lua"]


@dataclass
class CompileReport:
    """Outcome of compiling a directory of schema files."""

    written: Dict[str, List[Path]] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def sql_outputs(name: str, schema: CompiledSchema, out_dir: Path) -> Dict[Path, str]:
    """
    Render SQL scripts for a compiled schema.

    A single-database schema is written to `<name>.sql`; a two-database
    schema gets `<name>.<database>.sql` per database.
    """
    scripts = sql.render_schema(schema)
    if len(scripts) == 1:
        return {out_dir / f"{name}.sql": next(iter(scripts.values()))}
    return {out_dir / f"{name}.{db_name}.sql": text for db_name, text in scripts.items()}


def lua_outputs(name: str, schema: CompiledSchema, out_dir: Path) -> Dict[Path, str]:
    """Render the Lua descriptor of a compiled schema to `<name>.lua`."""
    return {out_dir / f"{name}.lua": lua.render_schema(schema)}


_RENDERERS = {
    "sql": sql_outputs,
    "lua": lua_outputs,
}


def compile_file(path: Path, out_dir: Path, target: Target) -> List[Path]:
    """
    Compile one schema file.

    The file is fully validated and rendered before anything is written, and
    all of its outputs are renamed into place together.

    Args:
        path: `<name>.json` schema document
        out_dir: Output directory
        target: "sql" or "lua"

    Returns:
        Paths written

    Raises:
        SchemaError: The first violation found in the file
    """
    path = Path(path)
    name = path.stem
    with schema_context(name):
        start = time.time()
        logger.info(f"Compiling schema {name!r} to {target}")

        databases = load_schema_file(path)
        schema = compile_schema(databases)
        outputs = _RENDERERS[target](name, schema, Path(out_dir))
        write_all_atomic(outputs)

        elapsed = time.time() - start
        for out_path in outputs:
            logger.info(f"Wrote {out_path}")
        logger.debug(f"Schema {name!r} compiled in {elapsed:.3f}s")
    return list(outputs)


def compile_directory(in_dir: Path, out_dir: Path, target: Target) -> CompileReport:
    """
    Compile every schema document in a directory.

    Files are processed in name order; a failing file is logged and skipped
    without affecting the others.

    Args:
        in_dir: Directory holding `<name>.json` files
        out_dir: Output directory
        target: "sql" or "lua"

    Returns:
        CompileReport listing written paths and failures per schema name
    """
    store = SchemaStore(in_dir)
    report = CompileReport()
    names = store.list_names()
    logger.info(f"Found {len(names)} schema file(s) in {in_dir}")

    for name in names:
        try:
            report.written[name] = compile_file(store.path_for(name), out_dir, target)
        except SchemaError as e:
            with schema_context(name):
                logger.error(f"Schema {name!r} failed ({e.kind}): {e}")
            report.failed[name] = f"{e.kind}: {e}"

    logger.info(
        f"Compiled {len(report.written)} schema(s) to {target}, {len(report.failed)} failed"
    )
    return report
