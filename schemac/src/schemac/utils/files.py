"""File output helpers."""

import os
import tempfile
from pathlib import Path
from typing import Dict


def write_all_atomic(outputs: Dict[Path, str]) -> None:
    """
    Write several files, renaming them into place only once all are staged.

    If staging any file fails, no target file is touched.

    Args:
        outputs: Mapping of target path to file contents

    Note:
        Creates parent directories if they don't exist.
    """
    staged = []
    try:
        for path, text in outputs.items():
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            staged.append((tmp_name, path))
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(text)
    except BaseException:
        for tmp_name, _ in staged:
            Path(tmp_name).unlink(missing_ok=True)
        raise

    for tmp_name, path in staged:
        os.replace(tmp_name, path)


def write_text_atomic(path: Path, text: str) -> None:
    """Write a single file through a temporary file renamed into place."""
    write_all_atomic({Path(path): text})
