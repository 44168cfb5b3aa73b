"""
Tema visual de la CLI.

Paletas por tema (palette), constructores de Text (styled), impresión
directa (printing) y tablas Rich (tables) para catálogo, formularios y
campos.
"""

# Desde palette
from formlayout.cli.theme.palette import (
    ThemeName,
    ColorPalette,
    THEMES,
    CLITheme,
    get_console,
    get_palette,
)

# Desde styled
from formlayout.cli.theme.styled import (
    styled_header,
    styled_label,
    styled_field,
    styled_success,
    styled_warning,
    styled_error,
    styled_info,
    styled_muted,
)

# Desde printing
from formlayout.cli.theme.printing import (
    print_header,
    print_field,
    print_success,
    print_warning,
    print_error,
    print_info,
    print_form_tree,
)

# Desde tables
from formlayout.cli.theme.tables import (
    create_results_table,
    print_dataset_table,
    print_schema_fields_table,
    print_workspaces_table,
    print_field_detail_table,
)

__all__ = [
    "ThemeName",
    "ColorPalette",
    "THEMES",
    "CLITheme",
    "get_console",
    "get_palette",
    "styled_header",
    "styled_label",
    "styled_field",
    "styled_success",
    "styled_warning",
    "styled_error",
    "styled_info",
    "styled_muted",
    "print_header",
    "print_field",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "print_form_tree",
    "create_results_table",
    "print_dataset_table",
    "print_schema_fields_table",
    "print_workspaces_table",
    "print_field_detail_table",
]
