"""Field metadata registry: schema adapter, metadata types, table registry."""

from gridforge.registry.adapter import (
    ID_REF,
    INT64,
    Int64,
    TableId,
    build_registry_meta,
    build_table_meta,
)
from gridforge.registry.registry import TableRegistry
from gridforge.registry.types import (
    ArrayFieldType,
    Cardinality,
    FieldMeta,
    FieldOverrides,
    FieldRenderer,
    FieldType,
    FilterOperator,
    ObjectFieldType,
    RegistryMeta,
    RelationMeta,
    RowAction,
    ScalarFieldType,
    ScalarKind,
    TableBuildOptions,
    TableMeta,
    UnionFieldType,
)

__all__ = [
    "ArrayFieldType",
    "Cardinality",
    "FieldMeta",
    "FieldOverrides",
    "FieldRenderer",
    "FieldType",
    "FilterOperator",
    "ID_REF",
    "INT64",
    "Int64",
    "ObjectFieldType",
    "RegistryMeta",
    "RelationMeta",
    "RowAction",
    "ScalarFieldType",
    "ScalarKind",
    "TableBuildOptions",
    "TableId",
    "TableMeta",
    "TableRegistry",
    "UnionFieldType",
    "build_registry_meta",
    "build_table_meta",
]
