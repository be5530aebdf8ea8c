"""Field metadata model: field types, renderers, operators, table descriptors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import TypeAdapter


class ScalarKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ID = "id"
    ENUM = "enum"
    JSON = "json"
    INT64 = "int64"
    BYTES = "bytes"


class FieldRenderer(str, Enum):
    """Closed set of cell/form renderer components."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATETIME = "datetime"
    SELECT = "select"
    ID_SELECT = "id-select"
    ID_MULTI_SELECT = "id-multi-select"
    JSON = "json"
    COLOR = "color"
    OBJECT = "object"
    ARRAY = "array"


class FilterOperator(str, Enum):
    """Operators a field advertises for server-style filtering."""

    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "notIn"
    IS_NULL = "isNull"
    IS_NOT_NULL = "isNotNull"


class Cardinality(str, Enum):
    ONE = "one"
    MANY = "many"


class PinnedSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class RowAction(str, Enum):
    EDIT = "edit"
    DUPLICATE = "duplicate"
    COPY_ID = "copyId"
    DELETE = "delete"


ALL_ROW_ACTIONS: tuple[RowAction, ...] = (
    RowAction.EDIT,
    RowAction.DUPLICATE,
    RowAction.COPY_ID,
    RowAction.DELETE,
)


# --- Field types ---


@dataclass(frozen=True)
class ScalarFieldType:
    type: ScalarKind
    format: str | None = None

    kind = "scalar"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind, "type": self.type.value}
        if self.format:
            result["format"] = self.format
        return result


@dataclass(frozen=True)
class ArrayFieldType:
    element: "FieldType"

    kind = "collection"
    collection = "array"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "collection": {"kind": self.collection, "element": self.element.to_dict()},
        }


@dataclass(frozen=True)
class ObjectFieldType:
    fields: dict[str, "FieldMeta"]

    kind = "collection"
    collection = "object"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "collection": {
                "kind": self.collection,
                "fields": {name: f.to_dict() for name, f in self.fields.items()},
            },
        }


@dataclass(frozen=True)
class UnionFieldType:
    members: tuple["FieldType", ...]

    kind = "union"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "members": [m.to_dict() for m in self.members]}


FieldType = Union[ScalarFieldType, ArrayFieldType, ObjectFieldType, UnionFieldType]


def scalar_kind(field_type: FieldType) -> ScalarKind | None:
    """Return the scalar kind, or None for collections and unions."""
    if isinstance(field_type, ScalarFieldType):
        return field_type.type
    return None


def is_numeric(field_type: FieldType) -> bool:
    return scalar_kind(field_type) in (ScalarKind.NUMBER, ScalarKind.INT64)


def is_array(field_type: FieldType) -> bool:
    return isinstance(field_type, ArrayFieldType)


# Operators each type may advertise. Defaults and overrides must stay within these.
_STRING_OPERATORS = (
    FilterOperator.CONTAINS,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
    FilterOperator.EQ,
    FilterOperator.NEQ,
    FilterOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL,
    FilterOperator.IN,
    FilterOperator.NOT_IN,
)
_ORDERED_OPERATORS = (
    FilterOperator.EQ,
    FilterOperator.NEQ,
    FilterOperator.LT,
    FilterOperator.LTE,
    FilterOperator.GT,
    FilterOperator.GTE,
    FilterOperator.BETWEEN,
    FilterOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL,
)
_BOOLEAN_OPERATORS = (
    FilterOperator.EQ,
    FilterOperator.NEQ,
    FilterOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL,
)
_MEMBERSHIP_OPERATORS = (
    FilterOperator.EQ,
    FilterOperator.NEQ,
    FilterOperator.IN,
    FilterOperator.NOT_IN,
    FilterOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL,
)
_NULL_OPERATORS = (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL)
_COLLECTION_OPERATORS = (
    FilterOperator.CONTAINS,
    FilterOperator.IN,
    FilterOperator.NOT_IN,
    FilterOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL,
)
_UNION_OPERATORS = (FilterOperator.EQ, FilterOperator.NEQ)

SCALAR_OPERATORS: dict[ScalarKind, tuple[FilterOperator, ...]] = {
    ScalarKind.STRING: _STRING_OPERATORS,
    ScalarKind.NUMBER: _ORDERED_OPERATORS,
    ScalarKind.INT64: _ORDERED_OPERATORS,
    ScalarKind.BOOLEAN: _BOOLEAN_OPERATORS,
    ScalarKind.DATE: _ORDERED_OPERATORS,
    ScalarKind.ENUM: _MEMBERSHIP_OPERATORS,
    ScalarKind.ID: _MEMBERSHIP_OPERATORS,
    ScalarKind.JSON: _NULL_OPERATORS,
    ScalarKind.BYTES: _NULL_OPERATORS,
}


def filter_operators_for(field_type: FieldType) -> list[FilterOperator]:
    """Default filter operators for a field type."""
    if isinstance(field_type, ScalarFieldType):
        return list(SCALAR_OPERATORS[field_type.type])
    if isinstance(field_type, (ArrayFieldType, ObjectFieldType)):
        return list(_COLLECTION_OPERATORS)
    return list(_UNION_OPERATORS)


# --- Field metadata ---


@dataclass(frozen=True)
class RelationMeta:
    table: str
    cardinality: Cardinality = Cardinality.ONE
    display_field: str | None = None
    color_field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "cardinality": self.cardinality.value,
            "displayField": self.display_field,
            "colorField": self.color_field,
        }


@dataclass(frozen=True)
class EnumMeta:
    values: tuple[str, ...]


@dataclass(frozen=True)
class FieldBehaviors:
    editable: bool = True
    required: bool = False
    unique: bool | None = None
    read_only: bool = False
    computed: bool | None = None
    default_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "editable": self.editable,
            "required": self.required,
            "unique": self.unique,
            "readOnly": self.read_only,
            "computed": self.computed,
            "defaultValue": self.default_value,
        }


@dataclass(frozen=True)
class FieldRender:
    label: str | None = None
    placeholder: str | None = None
    pinned: PinnedSide | None = None
    component: FieldRenderer | None = None
    options: EnumMeta | None = None
    help_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "placeholder": self.placeholder,
            "pinned": self.pinned.value if self.pinned else None,
            "component": self.component.value if self.component else None,
            "options": {"values": list(self.options.values)} if self.options else None,
            "helpText": self.help_text,
        }


@dataclass(frozen=True)
class FieldValidation:
    """The pydantic rule a field was derived from."""

    annotation: Any = Any
    field_info: Any = None

    def validate(self, value: Any) -> Any:
        """Validate a single value; raises pydantic.ValidationError."""
        constraints = list(getattr(self.field_info, "metadata", None) or [])
        annotation = self.annotation
        if constraints:
            annotation = Annotated[(annotation, *constraints)]
        return TypeAdapter(annotation).validate_python(value)


@dataclass(frozen=True)
class FieldMeta:
    name: str
    type: FieldType
    filter_operators: list[FilterOperator]
    relation: RelationMeta | None = None
    sortable: bool = True
    groupable: bool = True
    behaviors: FieldBehaviors = field(default_factory=FieldBehaviors)
    render: FieldRender = field(default_factory=FieldRender)
    validation: FieldValidation = field(default_factory=FieldValidation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.to_dict(),
            "relation": self.relation.to_dict() if self.relation else None,
            "filterOperators": [op.value for op in self.filter_operators],
            "sortable": self.sortable,
            "groupable": self.groupable,
            "behaviors": self.behaviors.to_dict(),
            "render": self.render.to_dict(),
        }


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: str = "asc"  # "asc" | "desc"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "direction": self.direction}


@dataclass(frozen=True)
class TableMeta:
    name: str
    label: str
    fields: dict[str, FieldMeta]
    default_sort: list[SortSpec] | None = None
    indexes: list[str] = field(default_factory=list)
    row_actions: tuple[RowAction, ...] = ALL_ROW_ACTIONS

    def relation_fields(self) -> list[FieldMeta]:
        return [f for f in self.fields.values() if f.relation]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
            "defaultSort": [s.to_dict() for s in self.default_sort]
            if self.default_sort
            else None,
            "indexes": list(self.indexes),
            "rowActions": [a.value for a in self.row_actions],
        }


@dataclass(frozen=True)
class RegistryMeta:
    version: str
    tables: dict[str, TableMeta]

    def get_table(self, name: str) -> TableMeta | None:
        return self.tables.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "tables": {name: t.to_dict() for name, t in self.tables.items()},
        }


# --- Adapter inputs ---


@dataclass
class FieldOverrides:
    """Per-field overrides; any value set here beats the inferred default."""

    relation: RelationMeta | None = None
    filter_operators: list[FilterOperator] | None = None
    sortable: bool | None = None
    groupable: bool | None = None
    editable: bool | None = None
    read_only: bool | None = None
    unique: bool | None = None
    computed: bool | None = None
    default_value: Any = None
    label: str | None = None
    placeholder: str | None = None
    pinned: PinnedSide | None = None
    component: FieldRenderer | None = None
    options: EnumMeta | None = None


@dataclass
class TableBuildOptions:
    table_label: str | None = None
    include_system_fields: bool = True
    field_overrides: dict[str, FieldOverrides] = field(default_factory=dict)
    # Keys: relation_one, relation_many, array, object, string, number,
    # boolean, date, enum, id, json
    default_renderers: dict[str, FieldRenderer] = field(default_factory=dict)
    row_actions: tuple[RowAction, ...] = ALL_ROW_ACTIONS
