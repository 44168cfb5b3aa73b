"""
Comandos base para gestión de formularios (workspaces).
"""

from typing import Annotated, Optional

import typer

from formlayout.errors import CatalogError
from formlayout.models import SchemaCatalog, load_catalog
from formlayout.workspace import FormWorkspace, WorkspaceManager
from formlayout.cli.theme import (
    get_console, print_error, print_field, print_form_tree, print_header, print_info,
    print_success, print_workspaces_table,
)


# Instancia global del gestor de workspaces
_workspace_manager: Optional[WorkspaceManager] = None


def get_workspace_manager() -> WorkspaceManager:
    """Obtiene el gestor de workspaces (singleton)."""
    global _workspace_manager
    if _workspace_manager is None:
        _workspace_manager = WorkspaceManager()
    return _workspace_manager


def load_workspace(workspace_id: str) -> FormWorkspace:
    """Carga un workspace por ID parcial o termina con error."""
    workspace = get_workspace_manager().get(workspace_id)
    if workspace is None:
        print_error(f"Formulario '{workspace_id}' no encontrado.")
        raise typer.Exit(1)
    return workspace


def load_workspace_catalog(workspace: FormWorkspace) -> SchemaCatalog:
    """Carga el catálogo asociado al workspace o termina con error."""
    if not workspace.catalog_path:
        print_error("El formulario no tiene un archivo de esquema asociado.")
        raise typer.Exit(1)
    try:
        return load_catalog(workspace.catalog_path)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(1)


def resolve_table_id(workspace: FormWorkspace, catalog: SchemaCatalog, table: str) -> str:
    """Acepta ID o nombre de tabla del dataset activo."""
    dataset = catalog.get_dataset(workspace.dataset_id) if workspace.dataset_id else None
    if dataset is not None:
        schema_table = dataset.get_table(table) or dataset.table_by_name(table)
        if schema_table is not None:
            return schema_table.id
    print_error(f"Tabla '{table}' no encontrada en el dataset activo.")
    raise typer.Exit(1)


def form_create(
    name: Annotated[str, typer.Argument(help="Nombre del webform")],
    schema: Annotated[str, typer.Option("--schema", "-s", help="Archivo JSON del esquema")],
    dataset: Annotated[Optional[str], typer.Option("--dataset", "-d", help="ID del dataset (default: el primero)")] = None,
) -> None:
    """
    Crea un formulario vacío asociado a un esquema.

    Ejemplo:
        formlayout form create "Pedidos" --schema esquema.json --dataset ds1
    """
    try:
        catalog = load_catalog(schema)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if dataset is None:
        if not catalog.datasets:
            print_error("El esquema no contiene datasets.")
            raise typer.Exit(1)
        dataset = catalog.datasets[0].id
    elif catalog.get_dataset(dataset) is None:
        print_error(f"Dataset '{dataset}' no encontrado.")
        raise typer.Exit(1)

    manager = get_workspace_manager()
    workspace = manager.create(name=name, catalog_path=str(schema), dataset_id=dataset)

    print_success("Formulario creado")
    print_field("ID", workspace.id)
    print_field("Nombre", workspace.name)
    print_field("Dataset", workspace.dataset_id)
    print_info(f"Usa 'formlayout form add-table {workspace.id} <tabla> --root' para agregar la tabla raíz.")


def form_list() -> None:
    """Lista los formularios guardados."""
    workspaces = get_workspace_manager().list_workspaces()

    if not workspaces:
        print_info("No hay formularios guardados.")
        print_info("Usa 'formlayout form create <nombre> --schema <archivo>' para crear uno.")
        return

    console = get_console()
    console.print()
    print_workspaces_table(workspaces, title=f"Formularios ({len(workspaces)})")
    console.print()


def form_show(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario (parcial o completo)")],
) -> None:
    """Muestra el árbol de tablas con sus bloques y campos."""
    workspace = load_workspace(workspace_id)

    catalog = None
    if workspace.catalog_path:
        try:
            catalog = load_catalog(workspace.catalog_path)
        except CatalogError:
            catalog = None

    console = get_console()
    console.print()
    print_header(f"FORMULARIO: {workspace.name or '-'}", subtitle=f"[{workspace.id}]")
    print_field("Dataset", workspace.dataset_id or "-")
    print_field("Campos", len(workspace.layout.fields))
    console.print()

    if not workspace.tree.tree_structure:
        print_info("(sin tablas)")
        return

    print_form_tree(
        workspace.tree,
        workspace.layout,
        catalog=catalog,
        dataset_id=workspace.dataset_id,
        title=workspace.name or workspace.id,
    )


def form_dataset(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    dataset: Annotated[str, typer.Argument(help="ID del nuevo dataset")],
    force: Annotated[bool, typer.Option("--force", "-f", help="No pedir confirmación")] = False,
) -> None:
    """
    Cambia el dataset del formulario.

    El árbol de tablas y los campos ubicados se descartan.

    Ejemplo:
        formlayout form dataset abc123 ds2 --force
    """
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)

    if catalog.get_dataset(dataset) is None:
        print_error(f"Dataset '{dataset}' no encontrado.")
        raise typer.Exit(1)

    if not force and workspace.tree.tree_structure:
        msg = f"¿Cambiar a '{dataset}' y descartar el formulario actual ({len(workspace.layout.fields)} campos)?"
        if not typer.confirm(msg, default=False):
            print_info("Cancelado.")
            return

    workspace.change_dataset(dataset)
    get_workspace_manager().save(workspace)
    print_success(f"Dataset cambiado a '{dataset}'")


def form_delete(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario a eliminar")],
    force: Annotated[bool, typer.Option("--force", "-f", help="No pedir confirmación")] = False,
) -> None:
    """Elimina un formulario guardado."""
    workspace = load_workspace(workspace_id)

    if not force:
        msg = f"¿Eliminar formulario '{workspace.name}' ({len(workspace.layout.fields)} campos)?"
        if not typer.confirm(msg, default=False):
            print_info("Cancelado.")
            return

    if get_workspace_manager().delete(workspace.id):
        print_success(f"Formulario '{workspace.name}' eliminado.")
    else:
        print_error("Error al eliminar formulario.")
        raise typer.Exit(1)
