"""
Excepciones de FormLayout.

Solo los errores estructurales del documento de importación abortan una
operación; los campos que no se resuelven contra el esquema activo se
omiten y se cuentan.
"""


class FormLayoutError(Exception):
    """Error base de FormLayout."""


class FormStructureError(FormLayoutError):
    """El documento de formulario no tiene la estructura esperada."""


class CatalogError(FormLayoutError):
    """El catálogo de esquemas no se pudo leer o no contiene el dataset."""


class UnknownPropertyError(FormLayoutError, KeyError):
    """Propiedad de personalización desconocida para un campo."""

    def __init__(self, prop: str):
        super().__init__(prop)
        self.prop = prop

    def __str__(self) -> str:
        return f"Propiedad desconocida: {self.prop}"


class WorkspaceNotFoundError(FormLayoutError, FileNotFoundError):
    """No existe el formulario (workspace) solicitado."""
