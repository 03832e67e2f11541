"""Tests for the Lua descriptor emitter."""

import json
import pytest
from schemac.errors import StructuralError
from schemac.ir.loader import parse_schema
from schemac.compiler.schema import compile_schema
from schemac.emit import lua


def render(doc):
    return lua.render_schema(compile_schema(parse_schema(json.dumps(doc))))


def test_module_frame(document):
    out = render(document)
    assert out.startswith(
        'local FrozenTableMetatable=require("Base.Lua.FrozenTableMetatable") '
        'local Set=require("Base.DataStructure.Set") '
        "local Schema={} "
    )
    assert out.endswith("setmetatable(Schema,FrozenTableMetatable) return Schema\n")
    assert "\n" not in out.rstrip("\n")


def test_database_and_table_objects(document):
    out = render(document)
    assert 'Schema.core={} Schema.core._objectType="database" Schema.core._objectName="app"' in out
    assert 'Schema.inst={} Schema.inst._objectType="database" Schema.inst._objectName="tenant"' in out
    assert 'Schema.core.users={} Schema.core.users._objectType="table" Schema.core.users._objectName="users"' in out
    for path in ("Schema.core.users", "Schema.core.users.id", "Schema.core", "Schema.inst.posts", "Schema.inst"):
        assert f"setmetatable({path},FrozenTableMetatable)" in out


def test_column_records(document):
    """Column records are flat, carry bounds and point back to their table."""
    out = render(document)
    assert (
        'Schema.core.users.age={name="age",nullable=false,type="integer",size="TINYINT",'
        'unsigned=true,autoIncrement=false,minValue=0,maxValue=255,_objectType="column"}'
    ) in out
    assert (
        'Schema.core.users.id={name="id",nullable=false,type="serial",size="INT",'
        'unsigned=true,autoIncrement=true,minValue=1,maxValue=4294967295,_objectType="column"}'
    ) in out
    assert "Schema.core.users.age._parentTable=Schema.core.users" in out
    assert "comments" not in out
    assert 'nickname={name="nickname",nullable=false,type="string",maxLength=50,_objectType="column"}' in out


def test_code_column_lookups(document):
    out = render(document)
    assert 'Schema.core.users.status={name="status",nullable=false,defaultValue=1,type="code",_objectType="column"}' in out
    assert "Schema.core.users.status.DELETED=0" in out
    assert 'Schema.core.users.status[0]="DELETED"' in out
    assert "Schema.core.users.status.ACTIVE=1" in out
    assert 'Schema.core.users.status[1]="ACTIVE"' in out
    assert "Schema.core.users.status.codes=Set:new({0,1})" in out


def test_foreign_key_records(document):
    """FK columns keep the target's kind without auto-increment and name their target."""
    out = render(document)
    assert (
        'Schema.core.sessions.userId={name="userId",nullable=false,type="serial",size="INT",'
        'unsigned=true,autoIncrement=false,minValue=1,maxValue=4294967295,'
        'references="app.users.id",_objectType="column"}'
    ) in out
    assert 'Schema.inst.posts.editorId={name="editorId",nullable=true,' in out


def test_instance_only_schema():
    doc = [{"name": "tenant", "type": "instance", "tables": [{"name": "t", "columns": []}]}]
    out = render(doc)
    assert "Schema.core" not in out
    assert 'Schema.inst._objectName="tenant"' in out


def test_non_identifier_names_are_bracketed():
    doc = [
        {
            "name": "app",
            "type": "fixed",
            "tables": [
                {
                    "name": "t",
                    "columns": [
                        {"name": "end", "type": "boolean"},
                        {"name": "grade", "type": "code", "values": [{"code": 1, "value": "1ST"}]},
                    ],
                }
            ],
        }
    ]
    out = render(doc)
    assert 'Schema.core.t["end"]={name="end",' in out
    assert 'Schema.core.t["end"]._parentTable=Schema.core.t' in out
    assert 'Schema.core.t.grade["1ST"]=1' in out


def test_render_record():
    assert lua.render_record({"name": "a\"b", "flag": True, "skip": None, "7": 3}) == '{name="a\\"b",flag=true,[7]=3}'
    with pytest.raises(StructuralError):
        lua.render_record({"values": [1, 2]})
    with pytest.raises(StructuralError):
        lua.render_record({"nested": {"a": 1}})


def test_custom_runtime_modules(document, monkeypatch):
    monkeypatch.setenv("SCHEMAC_LUA_SET_MODULE", "Runtime.Set")
    from schemac.config.settings import reset_settings

    reset_settings()
    try:
        assert 'local Set=require("Runtime.Set")' in render(document)
    finally:
        monkeypatch.delenv("SCHEMAC_LUA_SET_MODULE")
        reset_settings()


def test_foreign_key_to_integer_and_code_records():
    """Integer targets stay integers; code targets degrade to a bounded TINYINT."""
    doc = [
        {
            "name": "app",
            "type": "fixed",
            "tables": [
                {
                    "name": "items",
                    "columns": [
                        {"name": "rank", "type": "integer", "size": "SMALLINT", "minValue": 1, "maxValue": 9},
                        {"name": "status", "type": "code", "values": [{"code": 2, "value": "ON"}]},
                        {"name": "rankRef", "type": "FK", "column": "items.rank"},
                        {"name": "statusRef", "type": "FK", "column": "items.status"},
                    ],
                }
            ],
        }
    ]
    out = render(doc)
    assert (
        'Schema.core.items.rankRef={name="rankRef",nullable=false,type="integer",size="SMALLINT",'
        'unsigned=false,autoIncrement=false,minValue=1,maxValue=9,'
        'references="app.items.rank",_objectType="column"}'
    ) in out
    assert 'Schema.core.items.statusRef={name="statusRef",nullable=false,type="integer",size="TINYINT",' in out
    assert "Schema.core.items.statusRef.codes" not in out
