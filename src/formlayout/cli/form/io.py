"""
Comandos de exportación e importación del documento JSON.
"""

import re
from pathlib import Path
from typing import Annotated, Optional

import typer

from formlayout.codec import parse_document, to_json
from formlayout.errors import FormStructureError
from formlayout.cli.form.base import (
    get_workspace_manager,
    load_workspace,
    load_workspace_catalog,
)
from formlayout.cli.theme import (
    print_error, print_field, print_success, print_warning,
)


def default_export_filename(webform_name: str) -> str:
    """Nombre de archivo a partir del nombre del webform."""
    if not webform_name:
        return "form-config.json"
    return re.sub(r"[^a-z0-9_-]", "_", webform_name, flags=re.IGNORECASE) + ".json"


def form_export(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Archivo de salida ('-' = stdout)")] = None,
) -> None:
    """
    Exporta el formulario como documento JSON.

    Ejemplo:
        formlayout form export a1b2 -o pedidos.json
    """
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)

    document = workspace.export_document(catalog)
    text = to_json(document)

    if output == "-":
        typer.echo(text)
        return

    path = Path(output) if output else Path(default_export_filename(workspace.name))
    path.write_text(text + "\n", encoding="utf-8")

    metadata = document["metadata"]
    print_success(f"Formulario exportado: {path}")
    print_field("Campos", metadata["totalFields"])
    print_field("Tablas", metadata["totalTables"])


def form_import(
    workspace_id: Annotated[str, typer.Argument(help="ID del formulario")],
    input_file: Annotated[str, typer.Argument(help="Documento JSON a importar")],
) -> None:
    """
    Reemplaza el formulario por el contenido de un documento JSON.

    Los campos se resuelven por nombre contra el dataset activo; los que
    no existen se omiten.
    """
    workspace = load_workspace(workspace_id)
    catalog = load_workspace_catalog(workspace)

    path = Path(input_file)
    if not path.exists():
        print_error(f"Archivo no encontrado: {input_file}")
        raise typer.Exit(1)

    try:
        document = parse_document(path.read_text(encoding="utf-8"))
        result = workspace.apply_import(document, catalog)
    except FormStructureError as e:
        print_error(f"Error procesando el JSON: {e}")
        raise typer.Exit(1)

    get_workspace_manager().save(workspace)

    if result.is_empty:
        print_warning(
            "Ningún campo coincide con el dataset actual. "
            "Verifica que el dataset seleccionado sea el correcto."
        )
        return

    print_success(f"Formulario restaurado con {result.restored_count} campos.")
    if result.skipped:
        print_warning(f"{result.skipped} elemento(s) omitido(s) por no existir en el dataset.")
