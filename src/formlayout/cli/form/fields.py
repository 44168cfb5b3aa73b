"""
Comandos para ubicar, mover y personalizar campos del formulario.

Los comandos de arrastre pasan por ReorderEngine, de modo que la CLI
aplica exactamente las mismas reglas que la interfaz interactiva.
"""

from typing import Annotated, Any, Optional

import typer

from formlayout.errors import UnknownPropertyError
from formlayout.models import OVERRIDE_PROPERTIES, FormField
from formlayout.workspace import FormWorkspace
from formlayout.reorder import (
    BlockBody, BlockHandle, BlockHeader, DropResult, FieldSlot,
    PlacedField, TableSurface, UnplacedField,
)
from formlayout.cli.form.base import (
    get_workspace_manager,
    load_workspace,
    load_workspace_catalog,
)
from formlayout.cli.theme import (
    print_error, print_field_detail_table, print_info,
    print_schema_fields_table, print_success, print_warning,
)

BOOL_PROPERTIES = {
    "custom_required", "custom_read_only", "custom_auto_increment",
    "custom_is_visible", "is_primary",
}
TRUE_VALUES = {"true", "yes", "si", "sí", "1", "on"}
FALSE_VALUES = {"false", "no", "0", "off"}


def _require_selected(workspace: FormWorkspace) -> str:
    table_id = workspace.tree.selected_table
    if table_id is None:
        print_error("No hay tabla seleccionada. Usa 'formlayout form select'.")
        raise typer.Exit(1)
    return table_id


def _require_field(workspace: FormWorkspace, form_id: str) -> FormField:
    field = workspace.layout.get(form_id)
    if field is None:
        print_error(f"Campo '{form_id}' no encontrado en el formulario.")
        raise typer.Exit(1)
    return field


def parse_property_value(prop: str, raw: str) -> Any:
    """
    Convierte el texto de la línea de comandos al tipo de la propiedad.

    Raises:
        ValueError: Si el valor no es válido para la propiedad
    """
    if prop in BOOL_PROPERTIES:
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"Valor booleano inválido: {raw}")
    if prop == "custom_level":
        return int(raw)
    if prop == "custom_codelist_items":
        return [item.strip() for item in raw.split(",") if item.strip()]
    if prop == "dependency":
        # Formato: campo=valor1,valor2
        field_name, _, values = raw.partition("=")
        if not field_name.strip():
            raise ValueError("Dependencia inválida, formato: campo=valor1,valor2")
        value_list = [v.strip() for v in values.split(",") if v.strip()]
        return {"field": field_name.strip(), "value": value_list or None}
    return raw


def field_available(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
) -> None:
    """Lista los campos de la tabla seleccionada que aún no se ubicaron."""
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    _require_selected(workspace)

    fields = workspace.available_fields(catalog)
    if not fields:
        print_info("Todos los campos de la tabla ya están ubicados.")
        return
    print_schema_fields_table(fields, title=f"Campos disponibles ({len(fields)})")


def field_place(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    field: Annotated[str, typer.Argument(help="Campo del esquema (ID o nombre)")],
    block: Annotated[Optional[int], typer.Option("--block", "-b", min=1, help="Sumar al bloque indicado")] = None,
) -> None:
    """
    Ubica un campo de la tabla seleccionada.

    Sin --block el campo abre un bloque nuevo al final.

    Ejemplo:
        formlayout form place a1b2 Amount --block 1
    """
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    table_id = _require_selected(workspace)

    schema_table = catalog.table_by_id(table_id, workspace.dataset_id)
    schema_field = None
    if schema_table is not None:
        schema_field = schema_table.get_field(field) or schema_table.field_by_name(field)
    if schema_field is None:
        print_error(f"Campo '{field}' no encontrado en la tabla seleccionada.")
        raise typer.Exit(1)

    target = TableSurface() if block is None else BlockBody(block, table_id)
    result = workspace.engine().drag(UnplacedField(schema_field), target)
    if result is not DropResult.PLACED:
        print_warning(f"El campo '{schema_field.name}' ya está ubicado en la tabla.")
        raise typer.Exit(1)

    get_workspace_manager().save(workspace)
    placed = workspace.layout.fields[-1]
    print_success(f"Campo ubicado: {placed.name} → bloque {placed.block_id} [{placed.form_id}]")


def field_move(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    form_id: Annotated[str, typer.Argument(help="ID del campo ubicado")],
    block: Annotated[int, typer.Argument(min=1, help="Bloque destino")],
) -> None:
    """Mueve un campo ubicado a otro bloque."""
    workspace = load_workspace(workspace_id)
    table_id = _require_selected(workspace)
    field = _require_field(workspace, form_id)

    result = workspace.engine().drag(PlacedField(field.form_id), BlockBody(block, table_id))
    if result is not DropResult.MOVED:
        print_info("Sin cambios.")
        return

    get_workspace_manager().save(workspace)
    print_success(f"Campo {field.name} movido al bloque {block}.")


def field_reorder(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    form_id: Annotated[str, typer.Argument(help="Campo a mover")],
    target_form_id: Annotated[str, typer.Argument(help="Campo cuya posición ocupará")],
) -> None:
    """Reordena dos campos dentro del mismo bloque."""
    workspace = load_workspace(workspace_id)
    _require_selected(workspace)
    field = _require_field(workspace, form_id)
    target = _require_field(workspace, target_form_id)

    result = workspace.engine().drag(PlacedField(field.form_id), FieldSlot(target.form_id))
    if result is not DropResult.FIELDS_REORDERED:
        print_info("Sin cambios (los campos deben compartir bloque).")
        return

    get_workspace_manager().save(workspace)
    print_success("Campos reordenados.")


def field_reorder_block(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    block: Annotated[int, typer.Argument(help="Bloque a mover")],
    target_block: Annotated[int, typer.Argument(help="Bloque cuya posición ocupará")],
) -> None:
    """Mueve un bloque a la posición de otro en la tabla seleccionada."""
    workspace = load_workspace(workspace_id)
    table_id = _require_selected(workspace)

    result = workspace.engine().drag(BlockHandle(block), BlockHeader(target_block, table_id))
    if result is not DropResult.BLOCKS_REORDERED:
        print_info("Sin cambios.")
        return

    get_workspace_manager().save(workspace)
    order = ", ".join(str(b) for b in workspace.layout.block_ids(table_id))
    print_success(f"Orden de bloques: {order}")


def field_set(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    form_id: Annotated[str, typer.Argument(help="ID del campo ubicado")],
    prop: Annotated[str, typer.Argument(help="Propiedad (p.ej. custom_title, is_primary)")],
    value: Annotated[Optional[str], typer.Argument(help="Nuevo valor")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Quitar la personalización")] = False,
) -> None:
    """
    Personaliza una propiedad de un campo ubicado.

    Propiedades: custom_title, custom_tooltip, custom_placeholder,
    custom_required, custom_read_only, custom_auto_increment,
    custom_is_visible, custom_level, custom_codelist_items (a,b,c),
    is_primary, dependency (campo=v1,v2), reference_parent_field,
    reference_parent_table.
    """
    workspace = load_workspace(workspace_id)
    field = _require_field(workspace, form_id)
    prop = prop.replace("-", "_")

    if prop not in OVERRIDE_PROPERTIES:
        print_error(f"Propiedad desconocida: {prop}")
        raise typer.Exit(1)
    if value is None and not clear:
        print_error("Indica un valor o usa --clear.")
        raise typer.Exit(1)

    try:
        parsed = None if clear else parse_property_value(prop, value)
        workspace.layout.update(field.form_id, prop, parsed)
    except (ValueError, UnknownPropertyError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    workspace.touch()
    get_workspace_manager().save(workspace)
    print_success(f"{field.name}: {prop} {'restablecido' if clear else 'actualizado'}.")
    print_field_detail_table(field)


def field_remove(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    form_id: Annotated[str, typer.Argument(help="ID del campo ubicado")],
) -> None:
    """Quita un campo del formulario."""
    workspace = load_workspace(workspace_id)
    field = _require_field(workspace, form_id)

    workspace.layout.remove(field.form_id)
    workspace.touch()
    get_workspace_manager().save(workspace)
    print_success(f"Campo {field.name} quitado del formulario.")
