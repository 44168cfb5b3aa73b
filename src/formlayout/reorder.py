"""
Máquina de estados de arrastre y reordenamiento.

Consume eventos discretos (inicio de arrastre, fin de arrastre sobre un
destino) y los traduce en mutaciones del árbol de tablas y del modelo de
bloques. Un arrastre nunca lanza excepciones hacia quien lo origina: un
destino inválido o una carga mal formada se descartan sin modificar nada.

Estados: IDLE → DRAGGING(payload) → IDLE.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from formlayout.models.layout import BlockLayout, is_valid_block_id
from formlayout.models.schema import SchemaField
from formlayout.models.tree import FormTree

logger = logging.getLogger(__name__)


# ============================================================================
# Cargas de arrastre
# ============================================================================

@dataclass(frozen=True)
class UnplacedField:
    """Campo del esquema arrastrado desde la paleta (sin form_id)."""
    field: SchemaField


@dataclass(frozen=True)
class PlacedField:
    """Campo ya ubicado en el formulario."""
    form_id: str


@dataclass(frozen=True)
class BlockHandle:
    """Bloque completo arrastrado por su encabezado."""
    block_id: int


@dataclass(frozen=True)
class ChildTable:
    """Pestaña de tabla hija arrastrada en la barra de pestañas."""
    table_id: str


DragPayload = Union[UnplacedField, PlacedField, BlockHandle, ChildTable]


# ============================================================================
# Destinos
# ============================================================================

@dataclass(frozen=True)
class BlockHeader:
    """Encabezado de un bloque (destino para reordenar bloques)."""
    block_id: int
    table_id: Optional[str] = None


@dataclass(frozen=True)
class BlockBody:
    """Cuerpo de un bloque (destino para sumar o mover campos)."""
    block_id: int
    table_id: Optional[str] = None


@dataclass(frozen=True)
class FieldSlot:
    """Posición de otro campo ya ubicado."""
    form_id: str


@dataclass(frozen=True)
class TableSurface:
    """Superficie general del formulario de la tabla seleccionada."""


@dataclass(frozen=True)
class ChildTableTab:
    """Pestaña de otra tabla hija."""
    table_id: str


DropTarget = Union[BlockHeader, BlockBody, FieldSlot, TableSurface, ChildTableTab, None]


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DropResult(str, Enum):
    """Resultado de soltar una carga."""
    PLACED = "placed"
    MOVED = "moved"
    FIELDS_REORDERED = "fields_reordered"
    BLOCKS_REORDERED = "blocks_reordered"
    TABS_REORDERED = "tabs_reordered"
    DISCARDED = "discarded"


class ReorderEngine:
    """
    Aplica arrastres sobre un FormTree y un BlockLayout.

    Opera siempre sobre la tabla seleccionada del árbol.
    """

    def __init__(self, tree: FormTree, layout: BlockLayout):
        self.tree = tree
        self.layout = layout
        self._payload: Optional[DragPayload] = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._payload is None else DragState.DRAGGING

    @property
    def payload(self) -> Optional[DragPayload]:
        return self._payload

    def start_drag(self, payload: DragPayload) -> None:
        """Inicia un arrastre. Un arrastre previo sin resolver se descarta."""
        if self._payload is not None:
            logger.debug("Arrastre previo descartado: %r", self._payload)
        self._payload = payload

    def cancel(self) -> None:
        """Cancela el arrastre en curso sin modificar los modelos."""
        self._payload = None

    def end_drag(self, target: DropTarget) -> DropResult:
        """
        Resuelve el arrastre en curso contra el destino y vuelve a IDLE.

        Reglas, en orden de prioridad:
        1. Bloque sobre encabezado de bloque → reordenar bloques.
        2. Campo sin ubicar sobre cuerpo de bloque o superficie → ubicar.
        3. Campo ubicado sobre cuerpo de otro bloque → mover de bloque.
        4. Campo ubicado sobre otro campo del mismo bloque → reordenar.
        5. Cualquier otra combinación → descartar.
        """
        payload = self._payload
        self._payload = None
        if payload is None:
            return DropResult.DISCARDED

        result = self._resolve(payload, target)
        if result is DropResult.DISCARDED:
            logger.debug("Arrastre descartado: %r sobre %r", payload, target)
        return result

    def drag(self, payload: DragPayload, target: DropTarget) -> DropResult:
        """Atajo: inicia y resuelve un arrastre completo."""
        self.start_drag(payload)
        return self.end_drag(target)

    # ========================================================================
    # Transiciones
    # ========================================================================

    def _resolve(self, payload: DragPayload, target: DropTarget) -> DropResult:
        if isinstance(payload, ChildTable):
            if isinstance(target, ChildTableTab):
                return self._reorder_tabs(payload.table_id, target.table_id)
            return DropResult.DISCARDED

        table_id = self.tree.selected_table
        if table_id is None:
            return DropResult.DISCARDED
        if isinstance(target, (BlockBody, BlockHeader)) and not is_valid_block_id(target.block_id):
            return DropResult.DISCARDED

        if isinstance(payload, BlockHandle):
            if isinstance(target, BlockHeader) and self._same_table(target.table_id, table_id):
                if self.layout.reorder_blocks(table_id, payload.block_id, target.block_id):
                    return DropResult.BLOCKS_REORDERED
            return DropResult.DISCARDED

        if isinstance(payload, UnplacedField):
            if isinstance(target, TableSurface):
                placed = self.layout.place(payload.field, table_id)
            elif isinstance(target, BlockBody) and self._same_table(target.table_id, table_id):
                placed = self.layout.place(payload.field, table_id, target.block_id)
            else:
                return DropResult.DISCARDED
            return DropResult.PLACED if placed is not None else DropResult.DISCARDED

        if isinstance(payload, PlacedField):
            field = self.layout.get(payload.form_id)
            if field is None or field.form_id != payload.form_id or field.table_id != table_id:
                return DropResult.DISCARDED

            if isinstance(target, BlockBody) and self._same_table(target.table_id, table_id):
                if self.layout.move_to_block(field.form_id, target.block_id):
                    return DropResult.MOVED
                return DropResult.DISCARDED

            if isinstance(target, FieldSlot):
                if self.layout.reorder_within_block(field.form_id, target.form_id):
                    return DropResult.FIELDS_REORDERED
            return DropResult.DISCARDED

        return DropResult.DISCARDED

    def _reorder_tabs(self, source_table: str, target_table: str) -> DropResult:
        root = self.tree.root
        if root is None or source_table == target_table:
            return DropResult.DISCARDED
        ids = [child.table_id for child in root.children]
        if source_table not in ids or target_table not in ids:
            return DropResult.DISCARDED
        if self.tree.reorder_children(ids.index(source_table), ids.index(target_table)):
            return DropResult.TABS_REORDERED
        return DropResult.DISCARDED

    @staticmethod
    def _same_table(target_table: Optional[str], selected: str) -> bool:
        # Destinos sin tabla explícita pertenecen a la tabla seleccionada
        return target_table is None or target_table == selected
