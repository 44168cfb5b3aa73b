"""
Constructores de Text/Panel con los colores del tema activo.
"""

from rich import box
from rich.panel import Panel
from rich.text import Text

from formlayout.cli.theme.palette import get_palette

# Prefijos de mensajes de estado
SUCCESS_MARK = "[+]"
WARNING_MARK = "[!]"
ERROR_MARK = "[x]"


def styled_header(text: str, subtitle: str = None) -> Panel:
    """Panel de encabezado (nombre del formulario y, debajo, su ID)."""
    p = get_palette()
    lines = [(text, f"bold {p.table}")]
    if subtitle:
        lines.append(("\n" + subtitle, p.form_id))
    return Panel.fit(Text.assemble(*lines), border_style=p.border, box=box.ROUNDED)


def styled_label(label: str, value, unit: str = None) -> Text:
    p = get_palette()
    parts = [(f"{label}: ", p.label), (str(value), "bold")]
    if unit:
        parts.append((f" {unit}", p.form_id))
    return Text.assemble(*parts)


def styled_field(name: str, field_type: str, form_id: str = None, primary: bool = False) -> Text:
    """
    Campo ubicado tal como aparece en el árbol del formulario.

    Ejemplo: ``CustomerName (text) [3f2a9c1d]``; los campos primarios
    usan el color primary_field.
    """
    p = get_palette()
    text = Text.assemble(
        (name, f"bold {p.primary_field}" if primary else "bold"),
        (f" ({field_type})", p.field_type),
    )
    if form_id:
        text.append(f" [{form_id}]", style=p.form_id)
    return text


def _status(mark: str, message: str, style: str) -> Text:
    return Text(f"{mark} {message}", style=style)


def styled_success(text: str) -> Text:
    return _status(SUCCESS_MARK, text, get_palette().success)


def styled_warning(text: str) -> Text:
    return _status(WARNING_MARK, text, get_palette().warning)


def styled_error(text: str) -> Text:
    return _status(ERROR_MARK, text, get_palette().error)


def styled_info(text: str) -> Text:
    # Sangría para alinear con el texto de los mensajes con prefijo
    return Text(" " * (len(SUCCESS_MARK) + 1) + text, style=get_palette().info)


def styled_muted(text: str) -> Text:
    return Text(text, style=get_palette().form_id)
