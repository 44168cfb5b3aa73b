"""
Comandos para el árbol de tablas del formulario.
"""

from typing import Annotated

import typer

from formlayout.reorder import ChildTable, ChildTableTab, DropResult
from formlayout.cli.form.base import (
    get_workspace_manager,
    load_workspace,
    load_workspace_catalog,
    resolve_table_id,
)
from formlayout.cli.theme import (
    print_error, print_info, print_success, print_warning,
)


def table_add(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    table: Annotated[str, typer.Argument(help="Tabla del esquema (ID o nombre)")],
    label: Annotated[str, typer.Option("--label", "-l", help="Etiqueta de la tabla")] = "",
    title: Annotated[str, typer.Option("--title", "-t", help="Título visible")] = "",
    root: Annotated[bool, typer.Option("--root", help="Agregar como tabla raíz")] = False,
) -> None:
    """
    Agrega una tabla al formulario (raíz o hija) y la selecciona.

    Ejemplo:
        formlayout form add-table a1b2 Orders --root --label ord --title "Order Info"
    """
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    table_id = resolve_table_id(workspace, catalog, table)

    if workspace.tree.contains_table(table_id):
        print_warning(f"La tabla '{table}' ya está en el formulario.")
        raise typer.Exit(1)
    if root and workspace.tree.has_root_table:
        print_warning("El formulario ya tiene una tabla raíz.")
        raise typer.Exit(1)

    node = workspace.add_table(table_id, label or table, title or table, as_root=root)
    workspace.select_table(table_id)
    get_workspace_manager().save(workspace)

    kind = "raíz" if root else "hija"
    print_success(f"Tabla {kind} agregada: {table} [{node.id}]")


def table_rename(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    table: Annotated[str, typer.Argument(help="Tabla (ID o nombre)")],
    label: Annotated[str, typer.Option("--label", "-l", help="Nueva etiqueta")],
    title: Annotated[str, typer.Option("--title", "-t", help="Nuevo título")],
) -> None:
    """Cambia etiqueta y título de una tabla del formulario."""
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    table_id = resolve_table_id(workspace, catalog, table)

    if not workspace.rename_table(table_id, label, title):
        print_error(f"La tabla '{table}' no está en el formulario.")
        raise typer.Exit(1)

    get_workspace_manager().save(workspace)
    print_success(f"Tabla actualizada: {label} / {title}")


def table_remove(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    node_id: Annotated[str, typer.Argument(help="ID del nodo (ver 'form show')")],
) -> None:
    """
    Quita una tabla del formulario junto con sus tablas hijas.

    Los campos ubicados en las tablas quitadas también se eliminan.
    """
    workspace = load_workspace(workspace_id)
    node = workspace.tree.find(node_id)
    if node is None:
        print_error(f"Nodo '{node_id}' no encontrado.")
        raise typer.Exit(1)

    removed = workspace.remove_table(node.id)
    get_workspace_manager().save(workspace)
    print_success(f"{len(removed)} tabla(s) quitada(s) del formulario.")


def table_select(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    table: Annotated[str, typer.Argument(help="Tabla (ID o nombre)")],
) -> None:
    """Selecciona la tabla sobre la que operan los comandos de campos."""
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    table_id = resolve_table_id(workspace, catalog, table)

    if not workspace.tree.contains_table(table_id):
        print_error(f"La tabla '{table}' no está en el formulario.")
        raise typer.Exit(1)

    workspace.select_table(table_id)
    get_workspace_manager().save(workspace)
    print_success(f"Tabla seleccionada: {table}")


def table_reorder_tab(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    table: Annotated[str, typer.Argument(help="Pestaña a mover (ID o nombre)")],
    target: Annotated[str, typer.Argument(help="Pestaña cuya posición ocupará")],
) -> None:
    """Mueve una pestaña hija a la posición de otra."""
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)
    source_id = resolve_table_id(workspace, catalog, table)
    target_id = resolve_table_id(workspace, catalog, target)

    result = workspace.engine().drag(ChildTable(source_id), ChildTableTab(target_id))
    if result is not DropResult.TABS_REORDERED:
        print_info("Sin cambios.")
        return

    get_workspace_manager().save(workspace)
    print_success("Pestañas reordenadas.")
