"""
Funciones que imprimen directamente a la consola.
"""

from typing import TYPE_CHECKING, Optional

from rich.text import Text
from rich.tree import Tree

from formlayout.cli.theme.palette import get_console, get_palette
from formlayout.cli.theme.styled import (
    styled_header, styled_label, styled_success, styled_warning,
    styled_error, styled_info, styled_field, styled_muted,
)

if TYPE_CHECKING:
    from formlayout.models import BlockLayout, FormTree, SchemaCatalog, TreeNode


def print_header(text: str, subtitle: str = None) -> None:
    get_console().print(styled_header(text, subtitle))


def print_field(label: str, value, unit: str = None, indent: int = 2) -> None:
    """Imprime ``etiqueta: valor`` con sangría."""
    line = Text(" " * indent)
    line.append_text(styled_label(label, value, unit))
    get_console().print(line)


def print_success(text: str) -> None:
    get_console().print(styled_success(text))


def print_warning(text: str) -> None:
    get_console().print(styled_warning(text))


def print_error(text: str) -> None:
    get_console().print(styled_error(text))


def print_info(text: str) -> None:
    get_console().print(styled_info(text))


def _table_name(table_id: str, catalog: Optional["SchemaCatalog"], dataset_id: Optional[str]) -> str:
    if catalog is None:
        return table_id
    table = catalog.table_by_id(table_id, dataset_id)
    return table.name if table else table_id


def print_form_tree(
    tree: "FormTree",
    layout: "BlockLayout",
    catalog: Optional["SchemaCatalog"] = None,
    dataset_id: Optional[str] = None,
    title: str = "Formulario",
) -> None:
    """
    Imprime el árbol de tablas con sus bloques y campos.

    La tabla seleccionada se marca con '*'.
    """
    console = get_console()
    p = get_palette()

    root_label = styled_muted(title)
    rich_tree = Tree(root_label, guide_style=p.border)

    def add_node(parent: Tree, node: "TreeNode", is_root: bool) -> None:
        name = _table_name(node.table_id, catalog, dataset_id)
        marker = " *" if tree.selected_table == node.table_id else ""
        kind = "raíz" if is_root else "tabla"
        text = Text()
        text.append(name, style=f"bold {p.table}")
        text.append(f" {kind} · {node.label} · \"{node.title}\" [{node.id}]", style=p.form_id)
        text.append(marker, style=f"bold {p.primary_field}")
        branch = parent.add(text)
        for block_id, block_fields in layout.blocks_for_table(node.table_id):
            block = branch.add(Text(f"Bloque {block_id}", style=p.block))
            for field in block_fields:
                block.add(styled_field(field.name, field.type, field.form_id, field.is_primary))
        for child in node.children:
            add_node(branch, child, False)

    for index, node in enumerate(tree.tree_structure):
        add_node(rich_tree, node, tree.has_root_table and index == 0)

    console.print(rich_tree)
