"""
CLI de FormLayout - Diseño de formularios sobre esquemas de datasets.

Este módulo organiza los comandos CLI en sub-aplicaciones temáticas:
- catalog: Exploración del catálogo de esquemas
- form: Construcción, exportación e importación de formularios
"""

from typing import Annotated, Optional

import typer

from formlayout import __version__

# Crear aplicación principal
app = typer.Typer(
    name="formlayout",
    help="Diseño de formularios a partir de esquemas de datasets.",
    no_args_is_help=True,
)


def _register_subapps():
    """Registra sub-aplicaciones de forma diferida."""
    from formlayout.cli.catalog import catalog_app
    from formlayout.cli.form import form_app

    app.add_typer(catalog_app, name="catalog")
    app.add_typer(form_app, name="form")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"formlayout {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Muestra mensajes de depuración")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Muestra la versión"),
    ] = None,
):
    """
    FormLayout - Armado de formularios por tablas y bloques.

    Selecciona tablas de un esquema, agrupa sus campos en bloques y
    exporta el diseño como documento JSON para el runtime de formularios.
    """
    from formlayout.cli.theme import CLITheme
    from formlayout.config import get_settings
    from formlayout.logging_setup import setup_logging

    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    CLITheme.set_theme_by_name(settings.theme)


_register_subapps()
