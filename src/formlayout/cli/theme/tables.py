"""
Funciones para crear e imprimir tablas Rich.
"""

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table
from rich import box

from formlayout.cli.theme.palette import get_console, get_palette

if TYPE_CHECKING:
    from formlayout.models import Dataset, FormField, SchemaField


def create_results_table(
    title: str = None,
    columns: list[tuple[str, str]] = None,  # [(nombre, justify), ...]
) -> Table:
    """Crea una tabla estilizada."""
    p = get_palette()

    table = Table(
        title=title,
        title_style=f"bold {p.table}",
        border_style=p.border,
        header_style=f"bold {p.block}",
        box=box.ROUNDED,
        show_header=True,
        padding=(0, 1),
    )

    if columns:
        for name, justify in columns:
            table.add_column(name, justify=justify)

    return table


def print_dataset_table(dataset: "Dataset") -> None:
    """Imprime las tablas de un dataset con su cantidad de campos."""
    table = create_results_table(
        title=escape(f"{dataset.name} [{dataset.id}]"),
        columns=[("ID", "left"), ("Tabla", "left"), ("Campos", "right")],
    )
    for schema_table in dataset.tables:
        table.add_row(escape(schema_table.id), escape(schema_table.name), str(len(schema_table.fields)))
    get_console().print(table)


def print_schema_fields_table(fields: list["SchemaField"], title: str = None) -> None:
    """Imprime campos del esquema (p.ej. campos disponibles para ubicar)."""
    table = create_results_table(
        title=title,
        columns=[("ID", "left"), ("Campo", "left"), ("Tipo", "left"), ("Req.", "center")],
    )
    for field in fields:
        table.add_row(escape(field.id), escape(field.name), field.type, "si" if field.required else "")
    get_console().print(table)


def print_workspaces_table(workspaces: list[dict], title: str = None) -> None:
    """Imprime el listado de workspaces guardados."""
    table = create_results_table(
        title=title,
        columns=[
            ("ID", "left"),
            ("Nombre", "left"),
            ("Dataset", "left"),
            ("Tablas", "right"),
            ("Campos", "right"),
        ],
    )
    for ws in workspaces:
        table.add_row(
            ws["id"],
            escape(ws["name"] or "-"),
            ws["dataset_id"] or "-",
            str(ws["n_tables"]),
            str(ws["n_fields"]),
        )
    get_console().print(table)


def print_field_detail_table(field: "FormField") -> None:
    """Imprime las personalizaciones de un campo ubicado."""
    p = get_palette()
    table = Table(box=box.SIMPLE, show_header=False, border_style=p.border)
    table.add_column("Propiedad", style=p.label)
    table.add_column("Valor")

    table.add_row("form_id", field.form_id)
    table.add_row("campo", escape(f"{field.name} ({field.type})"))
    table.add_row("bloque", str(field.block_id))
    for prop in (
        "custom_title", "custom_tooltip", "custom_placeholder", "custom_required",
        "custom_read_only", "custom_auto_increment", "custom_is_visible",
        "custom_level", "custom_codelist_items", "is_primary", "dependency",
        "reference_parent_field", "reference_parent_table",
    ):
        value = getattr(field, prop)
        if value is not None and value is not False:
            table.add_row(prop, escape(str(value)))
    get_console().print(table)
