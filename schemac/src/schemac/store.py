"""Filesystem-backed access to the schema documents directory."""

import json
from pathlib import Path
from typing import List
from schemac.errors import SchemaNameError
from schemac.ir.loader import load_schema_file
from schemac.ir.model import Database
from schemac.compiler.constants import SCHEMA_NAME_PATTERN
from schemac.utils.files import write_text_atomic


class SchemaStore:
    """Schema documents stored as `<root>/<name>.json`."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        if not SCHEMA_NAME_PATTERN.match(name):
            raise SchemaNameError(f"Invalid schema name {name!r}")
        return self.root / f"{name}.json"

    def list_names(self) -> List[str]:
        """Names of all stored schemas, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob("*.json") if p.is_file())

    def path_for(self, name: str) -> Path:
        return self._path(name)

    def read(self, name: str) -> List[Database]:
        """Load the databases of a stored schema."""
        return load_schema_file(self._path(name))

    def write(self, name: str, databases: List[Database]) -> Path:
        """Store databases as pretty-printed JSON."""
        path = self._path(name)
        payload = [db.model_dump(by_alias=True, exclude_none=True) for db in databases]
        write_text_atomic(path, json.dumps(payload, indent=4))
        return path
