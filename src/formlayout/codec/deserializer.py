"""
Importación de documentos de formulario contra el esquema activo.

La importación es de mejor esfuerzo: las tablas o campos que no existen
en el dataset activo se omiten sin error. Solo un documento sin lista
"tables" se considera un error de formato.
"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from formlayout.codec.serializer import (
    default_codelist_items,
    default_level,
    default_placeholder,
    default_tooltip,
    default_visible,
)
from formlayout.errors import FormStructureError
from formlayout.models.base import generate_id
from formlayout.models.layout import Dependency, FormField
from formlayout.models.schema import SchemaCatalog, SchemaField

logger = logging.getLogger(__name__)


class ImportedTable(BaseModel):
    """Tabla del documento resuelta contra el esquema."""
    table_id: str
    label: str = ""
    title: str = ""
    is_root: bool = False


class ImportResult(BaseModel):
    """Resultado de una importación."""
    placed_fields: list[FormField] = Field(default_factory=list)
    webform_name: Optional[str] = None
    first_table_id: Optional[str] = None
    tables: list[ImportedTable] = Field(default_factory=list)
    skipped: int = 0  # Elementos que no se resolvieron

    @property
    def restored_count(self) -> int:
        return len(self.placed_fields)

    @property
    def is_empty(self) -> bool:
        """True si ningún campo coincidió con el dataset activo."""
        return not self.placed_fields


def parse_document(text: str) -> dict:
    """
    Convierte texto JSON en documento.

    Raises:
        FormStructureError: Si el texto no es JSON válido
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FormStructureError(f"JSON inválido: {e}") from e


def validate_document(document: Any) -> list:
    """
    Verifica la estructura mínima del documento.

    Returns:
        La lista de tablas del documento

    Raises:
        FormStructureError: Si falta "tables" o no es una lista
    """
    if not isinstance(document, dict):
        raise FormStructureError("Formato inválido: se esperaba un objeto JSON")
    tables = document.get("tables")
    if not isinstance(tables, list):
        raise FormStructureError(
            "Formato inválido: se esperaba una configuración de formulario con lista 'tables'"
        )
    return tables


def _changed(value, default):
    """Conserva value solo si difiere de lo que exportaría el esquema."""
    if value is None or value == default:
        return None
    return value


def restore_field(
    element: dict,
    schema_field: SchemaField,
    table_id: str,
    block_id: int,
) -> FormField:
    """Construye un FormField a partir de un elemento FIELD y su campo de esquema."""
    title = element.get("title") or None
    tooltip = element.get("tooltip") or None
    placeholder = element.get("placeholder") or None
    codelist = element.get("codelistItems") or None
    required = element.get("showRequiredCharacter", element.get("required"))

    dependency = None
    raw_dependency = element.get("dependency")
    if isinstance(raw_dependency, dict) and raw_dependency.get("field"):
        dependency = Dependency(
            field=raw_dependency["field"],
            value=raw_dependency.get("value"),
        )

    base = schema_field.model_dump()
    base["type"] = element.get("fieldType") or schema_field.type

    return FormField(
        **base,
        form_id=generate_id(),
        table_id=table_id,
        block_id=block_id,
        custom_title=_changed(title, schema_field.name),
        custom_tooltip=_changed(tooltip, default_tooltip(schema_field)),
        custom_placeholder=_changed(placeholder, default_placeholder(schema_field)),
        custom_required=_changed(required, schema_field.required),
        custom_read_only=_changed(element.get("readOnly"), bool(schema_field.read_only)),
        custom_is_visible=_changed(element.get("isVisible"), default_visible(schema_field)),
        custom_auto_increment=_changed(element.get("autoIncrement"), bool(schema_field.auto_increment)),
        custom_level=_changed(element.get("level"), default_level(schema_field)),
        custom_codelist_items=_changed(codelist, default_codelist_items(schema_field)),
        is_primary=bool(element.get("isPrimary", False)),
        dependency=dependency,
        reference_parent_field=element.get("referenceParentField"),
        reference_parent_table=element.get("referenceParentTable"),
    )


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _field_groups(elements: Any) -> list[list[dict]]:
    """Agrupa los elementos FIELD: un grupo por BLOCK o por FIELD suelto."""
    groups = []
    if not isinstance(elements, list):
        return groups
    for element in elements:
        if not isinstance(element, dict):
            continue
        if element.get("type") == "FIELD":
            groups.append([element])
        elif element.get("type") == "BLOCK":
            inner = [
                e for e in element.get("elements") or []
                if isinstance(e, dict) and e.get("type") == "FIELD"
            ]
            if inner:
                groups.append(inner)
    return groups


def deserialize(
    document: Any,
    catalog: SchemaCatalog,
    dataset_id: Optional[str],
) -> ImportResult:
    """
    Restaura los campos ubicados de un documento.

    Args:
        document: Documento ya parseado (dict)
        catalog: Catálogo de esquemas
        dataset_id: Dataset activo contra el que se resuelven los nombres

    Returns:
        ImportResult (puede estar vacío sin que sea un error)

    Raises:
        FormStructureError: Si el documento no tiene lista 'tables'
    """
    tables = validate_document(document)
    dataset = catalog.get_dataset(dataset_id) if dataset_id is not None else None

    webform_name = document.get("webformName")
    result = ImportResult(webform_name=webform_name if isinstance(webform_name, str) and webform_name else None)
    next_block: dict[str, int] = {}

    for table_entry in tables:
        if not isinstance(table_entry, dict):
            continue
        schema_table = dataset.table_by_name(table_entry.get("name")) if dataset else None
        groups = _field_groups(table_entry.get("elements"))

        if schema_table is None:
            skipped = sum(len(g) for g in groups)
            result.skipped += skipped
            logger.debug(
                "Tabla '%s' no existe en el dataset activo (%d campos omitidos)",
                table_entry.get("name"), skipped,
            )
            continue

        if all(t.table_id != schema_table.id for t in result.tables):
            result.tables.append(ImportedTable(
                table_id=schema_table.id,
                label=_text(table_entry.get("label")),
                title=_text(table_entry.get("title")),
                is_root=table_entry.get("isRootTable") is True,
            ))

        for group in groups:
            block_id = next_block.get(schema_table.id, 1)
            restored_any = False
            for element in group:
                schema_field = schema_table.field_by_name(element.get("name"))
                if schema_field is None:
                    result.skipped += 1
                    logger.debug(
                        "Campo '%s' no existe en la tabla '%s'",
                        element.get("name"), schema_table.name,
                    )
                    continue
                if any(f.table_id == schema_table.id and f.id == schema_field.id
                       for f in result.placed_fields):
                    result.skipped += 1
                    continue

                try:
                    restored = restore_field(element, schema_field, schema_table.id, block_id)
                except ValidationError as e:
                    result.skipped += 1
                    logger.debug(
                        "Campo '%s' omitido: %d valores inválidos",
                        schema_field.name, e.error_count(),
                    )
                    continue

                result.placed_fields.append(restored)
                restored_any = True
                if result.first_table_id is None:
                    result.first_table_id = schema_table.id
            if restored_any:
                next_block[schema_table.id] = block_id + 1

    logger.info(
        "Importación: %d campos restaurados, %d omitidos",
        result.restored_count, result.skipped,
    )
    return result
