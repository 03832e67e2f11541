"""Shared fixtures for schemac tests."""

import json
import pytest
from schemac.config.logging import setup_logging


def sample_document():
    """A core database plus an instance database referencing it."""
    return [
        {
            "name": "app",
            "type": "fixed",
            "tables": [
                {
                    "name": "users",
                    "type": "fixed",
                    "columns": [
                        {"name": "id", "type": "serial", "size": "INT", "comments": "identity"},
                        {"name": "age", "type": "integer", "size": "TINYINT", "unsigned": True},
                        {"name": "nickname", "type": "string", "maxLength": 50},
                        {"name": "avatar", "type": "binary", "maxSize": 16, "minSize": 16},
                        {"name": "active", "type": "boolean", "defaultValue": 1},
                        {"name": "createdAt", "type": "timestamp", "unsigned": True, "defaultValue": 0},
                        {
                            "name": "status",
                            "type": "code",
                            "defaultValue": 1,
                            "values": [
                                {"code": 0, "value": "DELETED"},
                                {"code": 1, "value": "ACTIVE"},
                            ],
                        },
                    ],
                    "indexes": [
                        {"type": "primary", "columns": ["id"]},
                        {"type": "unique", "columns": ["nickname"]},
                    ],
                },
                {
                    "name": "sessions",
                    "type": "fixed",
                    "columns": [
                        {"name": "id", "type": "serial", "size": "BIGINT"},
                        {"name": "userId", "type": "FK", "column": "users.id", "ondelete": "CASCADE"},
                    ],
                    "indexes": [
                        {"type": "primary", "columns": ["id"]},
                        {"type": "index", "columns": ["userId"]},
                    ],
                },
            ],
        },
        {
            "name": "tenant",
            "type": "instance",
            "tables": [
                {
                    "name": "posts",
                    "type": "fixed",
                    "columns": [
                        {"name": "id", "type": "serial", "size": "INT"},
                        {"name": "authorId", "type": "FK", "column": "app.users.id", "ondelete": "RESTRICT"},
                        {"name": "editorId", "type": "FK", "column": "app.users.id", "nullable": True},
                    ],
                    "indexes": [{"type": "primary", "columns": ["id"]}],
                }
            ],
        },
    ]


@pytest.fixture
def document():
    return sample_document()


@pytest.fixture
def schema_dir(tmp_path, document):
    """Input directory holding `sample.json`."""
    in_dir = tmp_path / "schemas"
    in_dir.mkdir()
    (in_dir / "sample.json").write_text(json.dumps(document, indent=4), encoding="utf-8")
    return in_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Rebind log handlers to the current stdout after each test."""
    yield
    setup_logging()
