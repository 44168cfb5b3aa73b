"""
Modelos de datos para FormLayout.

Este módulo contiene los modelos Pydantic del catálogo de esquemas, del
árbol de tablas y de la disposición de campos en bloques.
"""

from formlayout.models.base import (
    TimestampedModel,
    generate_id,
    generate_timestamp,
)
from formlayout.models.schema import (
    SchemaField,
    SchemaTable,
    Dataset,
    SchemaCatalog,
    load_catalog,
)
from formlayout.models.tree import TreeNode, FormTree
from formlayout.models.layout import FormField, Dependency, BlockLayout, OVERRIDE_PROPERTIES

__all__ = [
    # Clases base
    "TimestampedModel",
    "generate_id",
    "generate_timestamp",
    # Catálogo
    "SchemaField",
    "SchemaTable",
    "Dataset",
    "SchemaCatalog",
    "load_catalog",
    # Árbol de tablas
    "TreeNode",
    "FormTree",
    # Bloques
    "FormField",
    "Dependency",
    "BlockLayout",
    "OVERRIDE_PROPERTIES",
]
