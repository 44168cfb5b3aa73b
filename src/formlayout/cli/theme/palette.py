"""
Paletas de color de la CLI y consola Rich compartida.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.theme import Theme


class ThemeName(Enum):
    DEFAULT = "default"
    NORD = "nord"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class ColorPalette:
    """Colores por rol dentro del árbol de formulario y de los mensajes."""
    table: str          # Nombre de tabla del esquema
    block: str          # Encabezado "Bloque N"
    primary_field: str  # Campos marcados como primarios
    field_type: str
    form_id: str        # IDs de nodo y de campo
    success: str
    warning: str
    error: str
    info: str
    label: str
    border: str

    def rich_theme(self) -> Theme:
        """Estilos con nombre para usar en markup ([table]...[/table])."""
        styles = {name.replace("_", "."): color for name, color in asdict(self).items()}
        styles["title"] = f"bold {self.table}"
        return Theme(styles)


THEMES = {
    ThemeName.DEFAULT: ColorPalette(
        table="#5fafd7",
        block="#87afd7",
        primary_field="#d787af",
        field_type="#d7af87",
        form_id="#8a8a8a",
        success="#5faf5f",
        warning="#d7af00",
        error="#d75f5f",
        info="#5fafd7",
        label="#b2b2b2",
        border="#585858",
    ),
    ThemeName.NORD: ColorPalette(
        table="#88c0d0",
        block="#81a1c1",
        primary_field="#b48ead",
        field_type="#d08770",
        form_id="#616e88",
        success="#a3be8c",
        warning="#ebcb8b",
        error="#bf616a",
        info="#5e81ac",
        label="#d8dee9",
        border="#434c5e",
    ),
    ThemeName.MINIMAL: ColorPalette(
        table="bold",
        block="default",
        primary_field="underline",
        field_type="dim",
        form_id="dim",
        success="default",
        warning="bold",
        error="bold",
        info="default",
        label="dim",
        border="dim",
    ),
}


class CLITheme:
    """Tema activo y consola asociada (estado de proceso)."""

    _palette: ColorPalette = THEMES[ThemeName.DEFAULT]
    _console: Optional[Console] = None

    @classmethod
    def set_theme(cls, theme: ThemeName) -> None:
        cls._palette = THEMES[theme]
        cls._console = None

    @classmethod
    def set_theme_by_name(cls, name: str) -> None:
        """Activa un tema por nombre; nombres desconocidos usan el default."""
        try:
            theme = ThemeName(name.lower())
        except ValueError:
            theme = ThemeName.DEFAULT
        cls.set_theme(theme)

    @classmethod
    def get_palette(cls) -> ColorPalette:
        return cls._palette

    @classmethod
    def get_console(cls) -> Console:
        if cls._console is None:
            cls._console = Console(theme=cls._palette.rich_theme(), highlight=False)
        return cls._console


def get_console() -> Console:
    return CLITheme.get_console()


def get_palette() -> ColorPalette:
    return CLITheme.get_palette()
