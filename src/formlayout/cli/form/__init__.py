"""
Comandos CLI para construir formularios.

Un formulario (workspace) agrupa el árbol de tablas y los campos ubicados
en bloques para un dataset del catálogo.
"""

import typer

from formlayout.cli.form.base import (
    get_workspace_manager,
    form_create,
    form_list,
    form_show,
    form_dataset,
    form_delete,
)
from formlayout.cli.form.tables import (
    table_add,
    table_rename,
    table_remove,
    table_select,
    table_reorder_tab,
)
from formlayout.cli.form.fields import (
    field_available,
    field_place,
    field_move,
    field_reorder,
    field_reorder_block,
    field_set,
    field_remove,
)
from formlayout.cli.form.io import form_export, form_import
from formlayout.cli.form.batch import form_build

# Crear sub-aplicación
form_app = typer.Typer(help="Construcción de formularios")

# Comandos de formulario
form_app.command("create")(form_create)
form_app.command("list")(form_list)
form_app.command("show")(form_show)
form_app.command("dataset")(form_dataset)
form_app.command("delete")(form_delete)

# Comandos de tablas
form_app.command("add-table")(table_add)
form_app.command("rename-table")(table_rename)
form_app.command("remove-table")(table_remove)
form_app.command("select")(table_select)
form_app.command("reorder-tab")(table_reorder_tab)

# Comandos de campos
form_app.command("fields")(field_available)
form_app.command("place")(field_place)
form_app.command("move")(field_move)
form_app.command("reorder-fields")(field_reorder)
form_app.command("reorder-block")(field_reorder_block)
form_app.command("set")(field_set)
form_app.command("remove-field")(field_remove)

# Exportación / importación
form_app.command("export")(form_export)
form_app.command("import")(form_import)
form_app.command("build")(form_build)

__all__ = ["form_app", "get_workspace_manager"]
