"""Translate pydantic table schemas into field and table metadata.

Each table is declared as a pydantic model. The adapter walks the model's
fields, unwraps ``Optional``/``Annotated`` wrappers to decide whether a field
is required, and maps the innermost annotation onto a ``FieldType``:

    str (EmailStr / AnyUrl / UUID tag a format)  -> scalar:string   text
    int, float, Decimal                          -> scalar:number   number
    bool                                         -> scalar:boolean  checkbox
    date, datetime                               -> scalar:date     date
    Int64                                        -> scalar:int64    number
    Literal["a", ...] or str Enum                -> scalar:enum     select
    list[T] / set[T] / tuple[T, ...]             -> array(T)        array
    nested BaseModel                             -> object(fields)  object
    anything else (Any, None, dict, ...)         -> scalar:json     json

Unrecognized annotations never raise; they degrade to ``scalar:json`` so a
table can always be rendered.
"""

import types
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Union, get_args, get_origin
from uuid import UUID

from pydantic import AnyUrl, BaseModel, EmailStr
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined, Url

from gridforge.registry.types import (
    ArrayFieldType,
    Cardinality,
    EnumMeta,
    FieldBehaviors,
    FieldMeta,
    FieldOverrides,
    FieldRender,
    FieldRenderer,
    FieldType,
    FieldValidation,
    FilterOperator,
    ObjectFieldType,
    PinnedSide,
    RegistryMeta,
    RelationMeta,
    ScalarFieldType,
    ScalarKind,
    SortSpec,
    TableBuildOptions,
    TableMeta,
    UnionFieldType,
    filter_operators_for,
)

REGISTRY_VERSION = "0.1.0"


@dataclass(frozen=True)
class _TypeMarker:
    name: str


INT64 = _TypeMarker("int64")
ID_REF = _TypeMarker("id")

# 64-bit integer column (the schema equivalent of a bigint).
Int64 = Annotated[int, INT64]
# Document id referencing another table.
TableId = Annotated[str, ID_REF]

RendererPicker = Callable[[FieldType, RelationMeta | None], FieldRenderer]

_NONE_TYPE = type(None)
_SEQUENCE_ORIGINS = (list, set, frozenset, tuple)


def _unwrap(annotation: Any) -> tuple[Any, bool, list[Any]]:
    """Strip Annotated and Optional wrappers.

    Returns (inner annotation, nullable, collected Annotated metadata).
    A union of several non-None members is returned as-is.
    """
    nullable = False
    metadata: list[Any] = []
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            args = get_args(annotation)
            metadata.extend(args[1:])
            annotation = args[0]
            continue
        if origin in (Union, types.UnionType):
            args = get_args(annotation)
            members = [a for a in args if a is not _NONE_TYPE]
            if len(members) < len(args):
                nullable = True
            if len(members) == 1:
                annotation = members[0]
                continue
            if len(members) < len(args):
                annotation = Union[tuple(members)]
        return annotation, nullable, metadata


def _string_format(annotation: Any) -> str | None:
    if annotation is EmailStr:
        return "email"
    if isinstance(annotation, type):
        if issubclass(annotation, (AnyUrl, Url)):
            return "url"
        if issubclass(annotation, UUID):
            return "uuid"
    return None


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _literal_kind(values: tuple[Any, ...]) -> ScalarKind:
    if values and all(isinstance(v, str) for v in values):
        return ScalarKind.ENUM
    if values and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in values
    ):
        return ScalarKind.NUMBER
    return ScalarKind.JSON


def _scalar_type(annotation: Any, metadata: list[Any]) -> ScalarFieldType:
    """Map a non-collection annotation onto a scalar type."""
    if INT64 in metadata:
        return ScalarFieldType(ScalarKind.INT64)
    if ID_REF in metadata:
        return ScalarFieldType(ScalarKind.ID)

    fmt = _string_format(annotation)
    if annotation is str or fmt:
        return ScalarFieldType(ScalarKind.STRING, fmt)
    # bool before int: bool is an int subclass
    if annotation is bool:
        return ScalarFieldType(ScalarKind.BOOLEAN)
    if annotation in (int, float, Decimal):
        return ScalarFieldType(ScalarKind.NUMBER)
    if annotation is bytes:
        return ScalarFieldType(ScalarKind.BYTES)
    if isinstance(annotation, type) and issubclass(annotation, date):
        return ScalarFieldType(ScalarKind.DATE)
    if get_origin(annotation) is Literal:
        return ScalarFieldType(_literal_kind(get_args(annotation)))
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return ScalarFieldType(_literal_kind(tuple(m.value for m in annotation)))
    return ScalarFieldType(ScalarKind.JSON)


def _enum_values(annotation: Any) -> tuple[str, ...]:
    if get_origin(annotation) is Literal:
        return tuple(get_args(annotation))
    return tuple(m.value for m in annotation)


def _field_type(
    name: str,
    annotation: Any,
    metadata: list[Any],
    pick_renderer: RendererPicker,
) -> FieldType:
    origin = get_origin(annotation)

    if origin in _SEQUENCE_ORIGINS or annotation in _SEQUENCE_ORIGINS:
        args = [a for a in get_args(annotation) if a is not Ellipsis]
        element_annotation = args[0] if args else Any
        element = _to_field_meta(f"{name}[]", element_annotation, None, None, pick_renderer)
        return ArrayFieldType(element.type)

    if _is_model(annotation):
        nested = {
            sub_name: _to_field_meta(sub_name, info.annotation, info, None, pick_renderer)
            for sub_name, info in annotation.model_fields.items()
        }
        return ObjectFieldType(nested)

    if origin in (Union, types.UnionType):
        members = []
        for member in get_args(annotation):
            inner, _, inner_meta = _unwrap(member)
            members.append(_field_type(name, inner, inner_meta, pick_renderer))
        return UnionFieldType(tuple(members))

    return _scalar_type(annotation, metadata)


def _check_operators(name: str, field_type: FieldType, operators: list[FilterOperator]) -> None:
    allowed = set(filter_operators_for(field_type))
    invalid = [op.value for op in operators if op not in allowed]
    if invalid:
        raise ValueError(
            f"Field '{name}' declares filter operators {invalid} "
            f"that are not valid for its type"
        )


def _pick(override: Any, default: Any) -> Any:
    return default if override is None else override


def _to_field_meta(
    name: str,
    annotation: Any,
    field_info: FieldInfo | None,
    overrides: FieldOverrides | None,
    pick_renderer: RendererPicker,
) -> FieldMeta:
    """Build the FieldMeta for one schema node."""
    overrides = overrides or FieldOverrides()
    inner, nullable, metadata = _unwrap(annotation)
    if field_info is not None:
        metadata = metadata + list(field_info.metadata)

    optional = nullable or (field_info is not None and not field_info.is_required())
    field_type = _field_type(name, inner, metadata, pick_renderer)

    if overrides.filter_operators is not None:
        _check_operators(name, field_type, overrides.filter_operators)
        operators = list(overrides.filter_operators)
    else:
        operators = filter_operators_for(field_type)

    default_value = None
    if field_info is not None and field_info.default is not PydanticUndefined:
        default_value = field_info.default

    options = overrides.options
    if (
        options is None
        and isinstance(field_type, ScalarFieldType)
        and field_type.type is ScalarKind.ENUM
    ):
        options = EnumMeta(values=_enum_values(inner))

    fmt = field_type.format if isinstance(field_type, ScalarFieldType) else None
    component = overrides.component or pick_renderer(field_type, overrides.relation)

    return FieldMeta(
        name=name,
        type=field_type,
        relation=overrides.relation,
        filter_operators=operators,
        sortable=_pick(overrides.sortable, True),
        groupable=_pick(overrides.groupable, True),
        behaviors=FieldBehaviors(
            required=not optional,
            editable=_pick(overrides.editable, True),
            read_only=_pick(overrides.read_only, False),
            unique=overrides.unique,
            computed=overrides.computed,
            default_value=_pick(overrides.default_value, default_value),
        ),
        render=FieldRender(
            label=overrides.label,
            placeholder=overrides.placeholder or fmt,
            pinned=overrides.pinned,
            component=component,
            options=options,
            help_text=field_info.description if field_info is not None else None,
        ),
        validation=FieldValidation(annotation=annotation, field_info=field_info),
    )


def _renderer_picker(custom: dict[str, FieldRenderer]) -> RendererPicker:
    """Default renderer per type; relations win over the type-based choice."""

    def pick(field_type: FieldType, relation: RelationMeta | None) -> FieldRenderer:
        if relation is not None:
            if relation.cardinality is Cardinality.MANY:
                return custom.get("relation_many", FieldRenderer.ID_MULTI_SELECT)
            return custom.get("relation_one", FieldRenderer.ID_SELECT)
        if isinstance(field_type, ArrayFieldType):
            return custom.get("array", FieldRenderer.ARRAY)
        if isinstance(field_type, ObjectFieldType):
            return custom.get("object", FieldRenderer.OBJECT)
        if isinstance(field_type, UnionFieldType):
            return FieldRenderer.TEXT
        kind = field_type.type
        if kind is ScalarKind.STRING:
            return custom.get("string", FieldRenderer.TEXT)
        if kind in (ScalarKind.NUMBER, ScalarKind.INT64):
            return custom.get("number", FieldRenderer.NUMBER)
        if kind is ScalarKind.BOOLEAN:
            return custom.get("boolean", FieldRenderer.CHECKBOX)
        if kind is ScalarKind.DATE:
            return custom.get("date", FieldRenderer.DATE)
        if kind is ScalarKind.ENUM:
            return custom.get("enum", FieldRenderer.SELECT)
        if kind is ScalarKind.ID:
            return custom.get("id", FieldRenderer.ID_SELECT)
        return custom.get("json", FieldRenderer.JSON)

    return pick


def _system_fields(pick_renderer: RendererPicker) -> dict[str, FieldMeta]:
    id_type = ScalarFieldType(ScalarKind.ID)
    created_type = ScalarFieldType(ScalarKind.DATE)
    return {
        "_id": FieldMeta(
            name="_id",
            type=id_type,
            filter_operators=filter_operators_for(id_type),
            sortable=True,
            groupable=True,
            behaviors=FieldBehaviors(editable=False, read_only=True, required=True),
            render=FieldRender(
                label="ID",
                pinned=PinnedSide.LEFT,
                component=pick_renderer(id_type, None),
            ),
            validation=FieldValidation(annotation=str),
        ),
        "_creationTime": FieldMeta(
            name="_creationTime",
            type=created_type,
            filter_operators=filter_operators_for(created_type),
            sortable=True,
            groupable=False,
            behaviors=FieldBehaviors(editable=False, read_only=True, required=False),
            render=FieldRender(label="Created", component=pick_renderer(created_type, None)),
            validation=FieldValidation(annotation=float),
        ),
    }


def build_table_meta(
    table_name: str,
    schema: type[BaseModel],
    options: TableBuildOptions | None = None,
) -> TableMeta:
    """Describe one table from its pydantic schema.

    Args:
        table_name: Registry key for the table
        schema: Pydantic model whose fields are the table's columns
        options: Label, system-field synthesis, per-field overrides

    Returns:
        TableMeta with one FieldMeta per column.

    Raises:
        ValueError: If an override advertises operators invalid for the field type
    """
    options = options or TableBuildOptions()
    pick_renderer = _renderer_picker(options.default_renderers)

    fields: dict[str, FieldMeta] = {}
    if options.include_system_fields:
        fields.update(_system_fields(pick_renderer))

    for name, info in schema.model_fields.items():
        fields[name] = _to_field_meta(
            name,
            info.annotation,
            info,
            options.field_overrides.get(name),
            pick_renderer,
        )

    default_sort = None
    if options.include_system_fields:
        default_sort = [SortSpec(field="_creationTime", direction="desc")]

    return TableMeta(
        name=table_name,
        label=options.table_label or table_name,
        fields=fields,
        default_sort=default_sort,
        indexes=[],
        row_actions=options.row_actions,
    )


def build_registry_meta(tables: list[TableMeta]) -> RegistryMeta:
    return RegistryMeta(
        version=REGISTRY_VERSION,
        tables={t.name: t for t in tables},
    )
