"""
Modelo de árbol de tablas del formulario.

Un formulario tiene como máximo una tabla raíz; el resto de las tablas
cuelgan de ella como pestañas (children). Sin raíz, las tablas forman una
lista plana de nodos independientes.
"""

import logging
from typing import Iterator, Optional

from pydantic import BaseModel, Field

from formlayout.models.base import generate_id

logger = logging.getLogger(__name__)


class TreeNode(BaseModel):
    """Nodo del árbol: una tabla del esquema ubicada en el formulario."""

    id: str = Field(default_factory=generate_id)
    table_id: str  # Referencia a la tabla del esquema
    label: str = ""
    title: str = ""
    children: list["TreeNode"] = Field(default_factory=list)

    def iter_subtree(self) -> Iterator["TreeNode"]:
        """Recorre el nodo y sus descendientes en profundidad."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()


class FormTree(BaseModel):
    """
    Estructura jerárquica de tablas y cursor de tabla seleccionada.

    Invariante: si has_root_table es True, tree_structure tiene exactamente
    un elemento (la raíz); si es False, tree_structure es una lista plana.
    """

    tree_structure: list[TreeNode] = Field(default_factory=list)
    has_root_table: bool = False
    root_tables: list[str] = Field(default_factory=list)
    tabs: list[str] = Field(default_factory=list)
    selected_table: Optional[str] = None

    # ========================================================================
    # Consultas
    # ========================================================================

    @property
    def root(self) -> Optional[TreeNode]:
        """Nodo raíz, si existe."""
        if self.has_root_table and self.tree_structure:
            return self.tree_structure[0]
        return None

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Recorre todos los nodos en profundidad."""
        for node in self.tree_structure:
            yield from node.iter_subtree()

    def table_ids(self) -> list[str]:
        """IDs de tabla presentes en el árbol (orden de recorrido)."""
        return [node.table_id for node in self.iter_nodes()]

    def contains_table(self, table_id: str) -> bool:
        return any(node.table_id == table_id for node in self.iter_nodes())

    def find(self, node_id: str) -> Optional[TreeNode]:
        """Obtiene un nodo por ID (completo o prefijo)."""
        for node in self.iter_nodes():
            if node.id == node_id or node.id.startswith(node_id):
                return node
        return None

    def find_by_table(self, table_id: str) -> Optional[TreeNode]:
        """Obtiene el nodo que referencia una tabla del esquema."""
        for node in self.iter_nodes():
            if node.table_id == table_id:
                return node
        return None

    def is_root_table(self, table_id: str) -> bool:
        root = self.root
        return root is not None and root.table_id == table_id

    # ========================================================================
    # Mutaciones
    # ========================================================================

    def add_root(self, table_id: str, label: str, title: str) -> Optional[TreeNode]:
        """
        Crea la tabla raíz.

        No hace nada (retorna None) si ya existe una raíz.
        """
        if self.has_root_table:
            logger.debug("Raíz ya existente, se ignora add_root(%s)", table_id)
            return None

        node = TreeNode(table_id=table_id, label=label, title=title)
        # Tablas sueltas previas pasan a colgar de la nueva raíz
        node.children = list(self.tree_structure)
        self.tree_structure = [node]
        self.has_root_table = True
        self.root_tables.append(table_id)
        logger.debug("Raíz agregada: %s (%s)", table_id, node.id)
        return node

    def add_child(self, table_id: str, label: str, title: str) -> TreeNode:
        """
        Agrega una tabla hija.

        Con raíz se agrega al final de sus children; sin raíz se agrega
        como nodo suelto al final de la lista plana.
        """
        node = TreeNode(table_id=table_id, label=label, title=title)
        root = self.root
        if root is not None:
            root.children.append(node)
        else:
            self.tree_structure.append(node)
        self.tabs.append(table_id)
        logger.debug("Tabla hija agregada: %s (%s)", table_id, node.id)
        return node

    def rename(self, table_id: str, label: str, title: str) -> bool:
        """Actualiza label y title del nodo de la tabla. False si no existe."""
        node = self.find_by_table(table_id)
        if node is None:
            return False
        node.label = label
        node.title = title
        return True

    def remove(self, node_id: str) -> list[str]:
        """
        Elimina un nodo junto con todo su subárbol.

        Quitar la raíz vacía el árbol completo. Las tablas eliminadas salen
        de root_tables/tabs y el cursor se limpia si apuntaba a una de ellas.

        Returns:
            IDs de tabla eliminados (vacío si el nodo no existe)
        """
        target = None
        for node in self.iter_nodes():
            if node.id == node_id:
                target = node
                break
        if target is None:
            return []

        removed = [node.table_id for node in target.iter_subtree()]
        was_root = self.root is target

        self.tree_structure = _without_node(self.tree_structure, node_id)
        if was_root:
            self.has_root_table = False

        self.root_tables = [t for t in self.root_tables if t not in removed]
        self.tabs = [t for t in self.tabs if t not in removed]
        if self.selected_table in removed:
            self.selected_table = None

        logger.debug("Nodo %s eliminado (tablas: %s)", node_id, removed)
        return removed

    def select(self, table_id: Optional[str]) -> None:
        """Fija el cursor de tabla seleccionada."""
        self.selected_table = table_id

    def reorder_children(self, old_index: int, new_index: int) -> bool:
        """Mueve una pestaña hija de la raíz a otra posición."""
        root = self.root
        if root is None:
            return False
        n = len(root.children)
        if not (0 <= old_index < n and 0 <= new_index < n) or old_index == new_index:
            return False
        moved = root.children.pop(old_index)
        root.children.insert(new_index, moved)
        return True

    def clear(self) -> None:
        """Vacía el árbol y el cursor."""
        self.tree_structure = []
        self.has_root_table = False
        self.root_tables = []
        self.tabs = []
        self.selected_table = None


def _without_node(nodes: list[TreeNode], node_id: str) -> list[TreeNode]:
    result = []
    for node in nodes:
        if node.id == node_id:
            continue
        node.children = _without_node(node.children, node_id)
        result.append(node)
    return result
