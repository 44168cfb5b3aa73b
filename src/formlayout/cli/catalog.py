"""
Comandos CLI para explorar el catálogo de esquemas.
"""

from typing import Annotated, Optional

import typer

from formlayout.errors import CatalogError
from formlayout.models import load_catalog
from formlayout.cli.theme import (
    get_console, print_dataset_table, print_error, print_info,
    print_schema_fields_table,
)

catalog_app = typer.Typer(help="Exploración del catálogo de esquemas")


@catalog_app.command("show")
def catalog_show(
    schema: Annotated[str, typer.Argument(help="Archivo JSON del esquema")],
    dataset: Annotated[Optional[str], typer.Option("--dataset", "-d", help="Mostrar solo este dataset")] = None,
    table: Annotated[Optional[str], typer.Option("--table", "-t", help="Mostrar campos de esta tabla (ID o nombre)")] = None,
) -> None:
    """
    Muestra datasets y tablas de un archivo de esquema.

    Ejemplo:
        formlayout catalog show esquema.json --dataset ds1 --table Orders
    """
    try:
        catalog = load_catalog(schema)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    datasets = catalog.datasets
    if dataset is not None:
        datasets = [d for d in datasets if d.id == dataset]
        if not datasets:
            print_error(f"Dataset '{dataset}' no encontrado.")
            raise typer.Exit(1)

    if not datasets:
        print_info("El esquema no contiene datasets.")
        return

    console = get_console()
    for ds in datasets:
        console.print()
        if table is None:
            print_dataset_table(ds)
            continue

        schema_table = ds.get_table(table) or ds.table_by_name(table)
        if schema_table is None:
            print_error(f"Tabla '{table}' no encontrada en {ds.name}.")
            raise typer.Exit(1)
        print_schema_fields_table(schema_table.fields, title=f"{schema_table.name} ({ds.name})")
