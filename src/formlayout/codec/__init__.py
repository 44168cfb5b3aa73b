"""
Codec del documento de formulario (exportación e importación JSON).
"""

from formlayout.codec.serializer import (
    serialize,
    to_json,
    build_overview,
    build_tables,
    build_metadata,
    field_element,
)
from formlayout.codec.deserializer import (
    deserialize,
    parse_document,
    validate_document,
    ImportResult,
    ImportedTable,
)

__all__ = [
    # Exportación
    "serialize",
    "to_json",
    "build_overview",
    "build_tables",
    "build_metadata",
    "field_element",
    # Importación
    "deserialize",
    "parse_document",
    "validate_document",
    "ImportResult",
    "ImportedTable",
]
