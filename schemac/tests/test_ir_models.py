"""Tests for schema document models and loading."""

import json
import pytest
from pydantic import ValidationError
from schemac.errors import SchemaTypeError, StructuralError
from schemac.ir.loader import load_schema_file, parse_schema
from schemac.ir.model import CodeColumn, ForeignKeyColumn, IntegerColumn, SerialColumn


def test_parse_document(document):
    """Columns are discriminated by their type field."""
    databases = parse_schema(json.dumps(document))
    assert [db.name for db in databases] == ["app", "tenant"]

    users = databases[0].tables[0]
    assert isinstance(users.columns[0], SerialColumn)
    assert isinstance(users.columns[1], IntegerColumn)
    assert isinstance(users.columns[6], CodeColumn)
    assert users.columns[6].values[1].value == "ACTIVE"
    assert users.indexes[0].type == "primary"

    sessions = databases[0].tables[1]
    assert isinstance(sessions.columns[1], ForeignKeyColumn)
    assert sessions.columns[1].column == "users.id"


def test_camel_case_fields():
    """Wire names are camelCase; editor-only keys are dropped."""
    databases = parse_schema(
        json.dumps(
            [
                {
                    "name": "app",
                    "type": "fixed",
                    "tables": [
                        {
                            "name": "t",
                            "columns": [
                                {
                                    "name": "level",
                                    "type": "integer",
                                    "size": "INT",
                                    "minValue": 3,
                                    "autoIncrement": True,
                                    "comments": "editor note",
                                    "uiWidth": 120,
                                }
                            ],
                        }
                    ],
                }
            ]
        )
    )
    col = databases[0].tables[0].columns[0]
    assert col.min_value == 3
    assert col.auto_increment is True
    assert "comments" not in col.model_dump(by_alias=True)


def test_models_are_frozen(document):
    databases = parse_schema(json.dumps(document))
    with pytest.raises(ValidationError):
        databases[0].name = "other"


def test_unknown_column_type_is_type_error():
    doc = [{"name": "app", "type": "fixed", "tables": [{"name": "t", "columns": [{"name": "xx", "type": "float"}]}]}]
    with pytest.raises(SchemaTypeError) as exc_info:
        parse_schema(json.dumps(doc))
    assert "float" in str(exc_info.value)


def test_non_integer_length_is_type_error():
    doc = [
        {
            "name": "app",
            "type": "fixed",
            "tables": [{"name": "t", "columns": [{"name": "xx", "type": "string", "maxLength": 2.5}]}],
        }
    ]
    with pytest.raises(SchemaTypeError):
        parse_schema(json.dumps(doc))


def test_unknown_index_type_is_type_error():
    doc = [
        {
            "name": "app",
            "type": "fixed",
            "tables": [{"name": "t", "columns": [], "indexes": [{"type": "fulltext", "columns": []}]}],
        }
    ]
    with pytest.raises(SchemaTypeError):
        parse_schema(json.dumps(doc))


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        json.dumps({"name": "app"}),
        json.dumps([{"type": "fixed"}]),
        json.dumps([{"name": "app", "type": "fixed", "tables": [{"name": "t", "columns": [{"name": "xx"}]}]}]),
    ],
)
def test_wrong_shape_is_structural_error(text):
    with pytest.raises(StructuralError):
        parse_schema(text)


def test_load_schema_file(schema_dir):
    databases = load_schema_file(schema_dir / "sample.json")
    assert len(databases) == 2

    with pytest.raises(FileNotFoundError):
        load_schema_file(schema_dir / "missing.json")
