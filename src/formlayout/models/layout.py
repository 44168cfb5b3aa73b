"""
Modelo de bloques: campos ubicados en el formulario y su agrupación.

Cada campo ubicado (FormField) pertenece a una tabla y a un bloque
numerado; los campos de un mismo bloque se muestran en una fila
horizontal. El orden de visualización de los bloques de cada tabla se
guarda aparte (block_order) y puede diferir del orden numérico.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from formlayout.errors import UnknownPropertyError
from formlayout.models.base import generate_id
from formlayout.models.schema import SchemaField

logger = logging.getLogger(__name__)


class Dependency(BaseModel):
    """Dependencia de visibilidad respecto de otro campo."""
    field: str
    value: Optional[list[str]] = None


class FormField(SchemaField):
    """Instancia de un campo del esquema ubicada en el formulario."""

    form_id: str = Field(default_factory=generate_id)
    table_id: str
    block_id: int = Field(default=1, ge=1)

    # Personalizaciones (None = usar el valor del esquema)
    custom_title: Optional[str] = None
    custom_tooltip: Optional[str] = None
    custom_placeholder: Optional[str] = None
    custom_required: Optional[bool] = None
    custom_read_only: Optional[bool] = None
    custom_auto_increment: Optional[bool] = None
    custom_is_visible: Optional[bool] = None
    custom_level: Optional[int] = None
    custom_codelist_items: Optional[list[str]] = None
    is_primary: bool = False
    dependency: Optional[Dependency] = None
    reference_parent_field: Optional[str] = None
    reference_parent_table: Optional[str] = None


def is_valid_block_id(value) -> bool:
    """Los IDs de bloque son enteros desde 1."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


OVERRIDE_PROPERTIES = frozenset({
    "custom_title",
    "custom_tooltip",
    "custom_placeholder",
    "custom_required",
    "custom_read_only",
    "custom_auto_increment",
    "custom_is_visible",
    "custom_level",
    "custom_codelist_items",
    "is_primary",
    "dependency",
    "reference_parent_field",
    "reference_parent_table",
})


class BlockLayout(BaseModel):
    """
    Campos ubicados de todas las tablas y orden de bloques por tabla.

    Invariante: para cada tabla, el conjunto de IDs en block_order[tabla]
    es igual al conjunto de block_id presentes entre sus campos.
    """

    fields: list[FormField] = Field(default_factory=list)
    block_order: dict[str, list[int]] = Field(default_factory=dict)

    # ========================================================================
    # Consultas
    # ========================================================================

    def get(self, form_id: str) -> Optional[FormField]:
        """Obtiene un campo ubicado por form_id (completo o prefijo)."""
        for field in self.fields:
            if field.form_id == form_id:
                return field
        for field in self.fields:
            if field.form_id.startswith(form_id):
                return field
        return None

    def fields_for_table(self, table_id: str) -> list[FormField]:
        """Campos de la tabla, en orden de ubicación."""
        return [f for f in self.fields if f.table_id == table_id]

    def block_ids(self, table_id: str) -> list[int]:
        """IDs de bloque de la tabla en orden de visualización."""
        present = sorted({f.block_id for f in self.fields_for_table(table_id)})
        order = self.block_order.get(table_id)
        if not order:
            return present
        return [b for b in order if b in present] + [b for b in present if b not in order]

    def blocks_for_table(self, table_id: str) -> list[tuple[int, list[FormField]]]:
        """Campos de la tabla agrupados por bloque, en orden de visualización."""
        table_fields = self.fields_for_table(table_id)
        return [
            (block_id, [f for f in table_fields if f.block_id == block_id])
            for block_id in self.block_ids(table_id)
        ]

    def next_block_id(self, table_id: str) -> int:
        """Siguiente ID de bloque libre (max + 1, o 1 si no hay campos)."""
        existing = [f.block_id for f in self.fields_for_table(table_id)]
        return max(existing) + 1 if existing else 1

    def is_placed(self, table_id: str, field_id: str) -> bool:
        """Indica si el campo del esquema ya está ubicado en la tabla."""
        return any(f.id == field_id for f in self.fields_for_table(table_id))

    # ========================================================================
    # Mutaciones
    # ========================================================================

    def place(
        self,
        schema_field: SchemaField,
        table_id: str,
        target_block_id: Optional[int] = None,
    ) -> Optional[FormField]:
        """
        Ubica un campo del esquema en la tabla.

        Sin target_block_id el campo abre un bloque nuevo; con él se suma
        al final de ese bloque.

        Returns:
            El FormField creado, o None si el campo ya estaba en la tabla o
            el bloque destino no es válido
        """
        if target_block_id is not None and not is_valid_block_id(target_block_id):
            logger.debug("Bloque inválido: %r", target_block_id)
            return None
        if self.is_placed(table_id, schema_field.id):
            logger.debug("Campo %s ya ubicado en %s", schema_field.id, table_id)
            return None

        block_id = target_block_id if target_block_id is not None else self.next_block_id(table_id)
        form_field = FormField(
            **schema_field.model_dump(),
            form_id=self._new_form_id(),
            table_id=table_id,
            block_id=block_id,
        )
        self.fields.append(form_field)
        self._sync_block_order(table_id)
        logger.debug(
            "Campo %s ubicado en %s, bloque %d (%s)",
            schema_field.name, table_id, block_id, form_field.form_id,
        )
        return form_field

    def add_fields(self, fields: list[FormField]) -> None:
        """Agrega campos ya construidos (por ejemplo, restaurados de un JSON)."""
        tables = []
        for field in fields:
            if any(f.form_id == field.form_id for f in self.fields):
                field.form_id = self._new_form_id()
            self.fields.append(field)
            if field.table_id not in tables:
                tables.append(field.table_id)
        for table_id in tables:
            self._sync_block_order(table_id)

    def move_to_block(self, form_id: str, target_block_id: int) -> bool:
        """Reasigna el bloque de un campo."""
        if not is_valid_block_id(target_block_id):
            logger.debug("Bloque inválido: %r", target_block_id)
            return False
        field = self._require(form_id)
        if field is None or field.block_id == target_block_id:
            return False
        field.block_id = target_block_id
        self._sync_block_order(field.table_id)
        return True

    def reorder_within_block(self, form_id_a: str, form_id_b: str) -> bool:
        """
        Mueve el campo a a la posición del campo b dentro de su bloque.

        No hace nada si los campos están en bloques o tablas distintos.
        """
        a = self._require(form_id_a)
        b = self._require(form_id_b)
        if a is None or b is None or a is b:
            return False
        if a.table_id != b.table_id or a.block_id != b.block_id:
            return False

        slots = [i for i, f in enumerate(self.fields)
                 if f.table_id == a.table_id and f.block_id == a.block_id]
        block_fields = [self.fields[i] for i in slots]
        old_index = block_fields.index(a)
        new_index = block_fields.index(b)
        block_fields.insert(new_index, block_fields.pop(old_index))
        # Solo se reescriben las posiciones del bloque
        for slot, field in zip(slots, block_fields):
            self.fields[slot] = field
        return True

    def reorder_blocks(self, table_id: str, block_id_a: int, block_id_b: int) -> bool:
        """Mueve el bloque a a la posición que ocupa el bloque b."""
        if block_id_a == block_id_b:
            return False
        order = self.block_ids(table_id)
        if block_id_a not in order or block_id_b not in order:
            return False
        new_index = order.index(block_id_b)
        order.remove(block_id_a)
        order.insert(new_index, block_id_a)
        self.block_order[table_id] = order
        logger.debug("Orden de bloques de %s: %s", table_id, order)
        return True

    def update(self, form_id: str, prop: str, value: Any) -> bool:
        """
        Modifica una personalización del campo.

        value=None limpia la personalización (vuelve al valor del esquema).

        Raises:
            UnknownPropertyError: Si prop no es una personalización válida
        """
        if prop not in OVERRIDE_PROPERTIES:
            raise UnknownPropertyError(prop)
        field = self._require(form_id)
        if field is None:
            return False

        if prop == "is_primary" and value is None:
            value = False
        elif prop == "dependency" and isinstance(value, dict):
            value = Dependency(**value)
        setattr(field, prop, value)
        return True

    def remove(self, form_id: str) -> Optional[FormField]:
        """Elimina un campo ubicado."""
        field = self._require(form_id)
        if field is None:
            return None
        self.fields.remove(field)
        self._sync_block_order(field.table_id)
        return field

    def remove_table(self, table_id: str) -> int:
        """Elimina todos los campos de una tabla. Retorna cuántos se quitaron."""
        before = len(self.fields)
        self.fields = [f for f in self.fields if f.table_id != table_id]
        self.block_order.pop(table_id, None)
        return before - len(self.fields)

    def clear(self) -> None:
        self.fields = []
        self.block_order = {}

    # ========================================================================
    # Internos
    # ========================================================================

    def _require(self, form_id: str) -> Optional[FormField]:
        for field in self.fields:
            if field.form_id == form_id:
                return field
        logger.debug("Campo ubicado no encontrado: %s", form_id)
        return None

    def _new_form_id(self) -> str:
        used = {f.form_id for f in self.fields}
        form_id = generate_id()
        while form_id in used:
            form_id = generate_id()
        return form_id

    def _sync_block_order(self, table_id: str) -> None:
        """Agrega bloques nuevos al final y descarta los que quedaron vacíos."""
        present = sorted({f.block_id for f in self.fields_for_table(table_id)})
        current = self.block_order.get(table_id, [])
        order = [b for b in current if b in present]
        order.extend(b for b in present if b not in order)
        if order:
            self.block_order[table_id] = order
        else:
            self.block_order.pop(table_id, None)
