"""
Exportación del formulario a documento JSON versionado.

serialize() es una función pura de sus entradas: dos llamadas sin
mutaciones intermedias producen el mismo documento salvo generatedAt.
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

from formlayout.config import (
    ADVANCED_TYPES,
    AUTO_INCREMENT_TYPES,
    CODELIST_TYPES,
    DEFAULT_CODELIST_ITEMS,
    DEFAULT_WEBFORM_NAME,
    FORMAT_VERSION,
    GENERATED_BY,
    LABEL_TYPES,
    PLACEHOLDER_TYPES,
)
from formlayout.models.layout import BlockLayout, FormField
from formlayout.models.schema import SchemaCatalog, SchemaField
from formlayout.models.tree import FormTree, TreeNode


# ============================================================================
# Valores efectivos (personalización o valor del esquema)
# ============================================================================

def default_title(field: SchemaField) -> str:
    return field.name


def default_tooltip(field: SchemaField) -> str:
    return field.description or ""


def default_placeholder(field: SchemaField) -> str:
    return f"Enter {field.name.lower()}"


def default_level(field: SchemaField) -> int:
    return field.level or 1


def default_codelist_items(field: SchemaField) -> list[str]:
    return list(field.codelist_items or DEFAULT_CODELIST_ITEMS)


def default_visible(field: SchemaField) -> bool:
    return field.is_visible is not False


def _pick(override, fallback):
    return override if override is not None else fallback


def overview_entry(field: FormField) -> dict:
    """Entrada FIELD del overview."""
    return {
        "field": field.name,
        "type": "FIELD",
        "fieldType": field.type,
        "header": field.custom_title or field.name,
        "isPrimary": field.is_primary,
    }


def field_element(field: FormField) -> dict:
    """Elemento FIELD de una tabla con todos los atributos resueltos."""
    field_type = field.type.lower()
    element: dict[str, Any] = {
        "type": "FIELD",
        "name": field.name,
        "fieldType": field.type,
        "title": field.custom_title or default_title(field),
        "tooltip": field.custom_tooltip or default_tooltip(field),
        "isPrimary": field.is_primary,
        "showRequiredCharacter": _pick(field.custom_required, field.required),
        "isVisible": _pick(field.custom_is_visible, default_visible(field)),
        "readOnly": _pick(field.custom_read_only, bool(field.read_only)),
    }

    if field_type in PLACEHOLDER_TYPES:
        element["placeholder"] = field.custom_placeholder or default_placeholder(field)

    if field_type in LABEL_TYPES:
        element["level"] = field.custom_level or default_level(field)

    if field_type in AUTO_INCREMENT_TYPES:
        element["autoIncrement"] = _pick(field.custom_auto_increment, bool(field.auto_increment))

    if field_type in CODELIST_TYPES:
        element["codelistItems"] = list(field.custom_codelist_items or default_codelist_items(field))

    if field.dependency is not None:
        element["dependency"] = {
            "field": field.dependency.field,
            "value": field.dependency.value,
        }

    if field.reference_parent_field:
        element["referenceParentField"] = field.reference_parent_field
    if field.reference_parent_table:
        element["referenceParentTable"] = field.reference_parent_table

    return element


def _group_elements(blocks: list[tuple[int, list[FormField]]], build) -> list[dict]:
    """Un bloque de un campo va suelto; con más de uno se envuelve en BLOCK."""
    elements = []
    for _, block_fields in blocks:
        if len(block_fields) == 1:
            elements.append(build(block_fields[0]))
        elif len(block_fields) > 1:
            elements.append({
                "type": "BLOCK",
                "elements": [build(f) for f in block_fields],
            })
    return elements


# ============================================================================
# Secciones del documento
# ============================================================================

def build_overview(tree: FormTree, layout: BlockLayout) -> list[dict]:
    """
    Resumen: campos de la raíz agrupados por bloque, seguidos de una
    entrada TABLE por cada hija directa. Sin raíz, lista los campos de la
    tabla seleccionada.
    """
    root = tree.root
    if root is None:
        if tree.selected_table is None:
            return []
        return [
            overview_entry(field)
            for _, block_fields in layout.blocks_for_table(tree.selected_table)
            for field in block_fields
        ]

    overview = _group_elements(layout.blocks_for_table(root.table_id), overview_entry)
    for child in root.children:
        overview.append({
            "field": child.label,
            "type": "TABLE",
            "header": child.title,
        })
    return overview


def build_tables(
    tree: FormTree,
    layout: BlockLayout,
    catalog: Optional[SchemaCatalog] = None,
    dataset_id: Optional[str] = None,
) -> list[dict]:
    """Una entrada por nodo del árbol con campos ubicados (en profundidad)."""
    tables = []
    processed: set[str] = set()

    def process(node: TreeNode, is_root: bool) -> None:
        if node.table_id not in processed and layout.fields_for_table(node.table_id):
            schema_table = catalog.table_by_id(node.table_id, dataset_id) if catalog else None
            entry: dict[str, Any] = {
                "name": schema_table.name if schema_table else node.table_id,
                "label": node.label,
                "title": node.title,
                "multipleRecords": False,
                "isVisible": not is_root,
            }
            if is_root:
                entry["isRootTable"] = True
            entry["elements"] = _group_elements(layout.blocks_for_table(node.table_id), field_element)
            tables.append(entry)
            processed.add(node.table_id)

        for child in node.children:
            process(child, False)

    for index, node in enumerate(tree.tree_structure):
        process(node, tree.has_root_table and index == 0)

    return tables


def build_metadata(layout: BlockLayout) -> dict:
    fields = layout.fields
    field_types = []
    for field in fields:
        if field.type not in field_types:
            field_types.append(field.type)

    return {
        "totalFields": len(fields),
        "totalTables": len({f.table_id for f in fields}),
        "fieldTypes": field_types,
        "hasAdvancedFields": any(
            f.type.lower() in ADVANCED_TYPES
            or f.is_primary
            or bool(f.custom_read_only)
            or bool(f.custom_auto_increment)
            for f in fields
        ),
    }


def serialize(
    tree: FormTree,
    layout: BlockLayout,
    display_name: str,
    catalog: Optional[SchemaCatalog] = None,
    dataset_id: Optional[str] = None,
    generated_at: Optional[str] = None,
) -> dict:
    """
    Genera el documento del formulario.

    Args:
        tree: Árbol de tablas
        layout: Campos ubicados y orden de bloques
        display_name: Nombre del formulario (vacío → nombre por defecto)
        catalog: Catálogo para resolver nombres de tabla
        dataset_id: Dataset activo dentro del catálogo
        generated_at: Timestamp ISO a usar (default: ahora, UTC)

    Returns:
        Dict listo para serializar con json
    """
    if generated_at is None:
        generated_at = datetime.now(timezone.utc).isoformat()

    return {
        "version": FORMAT_VERSION,
        "generatedBy": GENERATED_BY,
        "generatedAt": generated_at,
        "webformName": display_name or DEFAULT_WEBFORM_NAME,
        "overview": build_overview(tree, layout),
        "tables": build_tables(tree, layout, catalog, dataset_id),
        "hideTabularData": False,
        "metadata": build_metadata(layout),
    }


def to_json(document: dict) -> str:
    """Renderiza el documento con indentación de 2 espacios."""
    return json.dumps(document, indent=2, ensure_ascii=False)
