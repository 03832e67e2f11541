"""Schema declarations as stored by the schema editor."""

from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Discriminator, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel


class SchemaModel(BaseModel):
    """Base for all declarations: camelCase on the wire, immutable in memory."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ColumnBase(SchemaModel):
    """Fields shared by every column kind."""

    name: str
    nullable: StrictBool = False
    default_value: Any = None


class IntegerColumn(ColumnBase):
    """Integer column; bounds default to the absolute range of its size."""

    type: Literal["integer"] = "integer"
    size: str
    unsigned: StrictBool = False
    auto_increment: StrictBool = False
    min_value: Optional[StrictInt] = None
    max_value: Optional[StrictInt] = None


class SerialColumn(ColumnBase):
    """Unsigned auto-incrementing identity column."""

    type: Literal["serial"] = "serial"
    size: str
    unsigned: StrictBool = True
    auto_increment: StrictBool = True
    min_value: Optional[StrictInt] = None  # Computed
    max_value: Optional[StrictInt] = None  # Computed


class TimestampColumn(ColumnBase):
    """Epoch timestamp stored as a wide integer."""

    type: Literal["timestamp"] = "timestamp"
    unsigned: StrictBool = False


class StringColumn(ColumnBase):
    """Variable length character column."""

    type: Literal["string"] = "string"
    max_length: Optional[StrictInt] = None
    min_length: Optional[StrictInt] = None


class BinaryColumn(ColumnBase):
    """Fixed or variable width byte column."""

    type: Literal["binary"] = "binary"
    max_size: Optional[StrictInt] = None
    min_size: Optional[StrictInt] = None


class BooleanColumn(ColumnBase):
    """Boolean stored as a one byte integer."""

    type: Literal["boolean"] = "boolean"


class CodeValue(SchemaModel):
    """One member of a code column's enumeration."""

    code: StrictInt
    value: str


class CodeColumn(ColumnBase):
    """Integer column restricted to a declared enumeration."""

    type: Literal["code"] = "code"
    values: List[CodeValue] = Field(default_factory=list)


class ForeignKeyColumn(ColumnBase):
    """Column whose type is taken from the column it references."""

    type: Literal["FK"] = "FK"
    column: str  # "[database.]table.column"
    ondelete: Optional[str] = None


Column = Annotated[
    Union[
        IntegerColumn,
        SerialColumn,
        TimestampColumn,
        StringColumn,
        BinaryColumn,
        BooleanColumn,
        CodeColumn,
        ForeignKeyColumn,
    ],
    Discriminator("type"),
]

# Columns that survive compilation (foreign keys are resolved away)
ConcreteColumn = Union[
    IntegerColumn,
    SerialColumn,
    TimestampColumn,
    StringColumn,
    BinaryColumn,
    BooleanColumn,
    CodeColumn,
]


class Index(SchemaModel):
    """Primary key, unique constraint or plain index over table columns."""

    type: Literal["primary", "unique", "index"]
    columns: List[str]


class Table(SchemaModel):
    """Table declaration."""

    name: str
    type: str = "fixed"
    columns: List[Column] = Field(default_factory=list)
    indexes: List[Index] = Field(default_factory=list)


class Database(SchemaModel):
    """Core ("fixed") or per-tenant ("instance") database declaration."""

    name: str
    type: Literal["fixed", "instance"]
    tables: List[Table] = Field(default_factory=list)
