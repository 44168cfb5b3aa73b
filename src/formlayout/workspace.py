"""
Módulo de gestión de formularios en edición (workspaces).

Un workspace reúne el árbol de tablas, los campos ubicados y el nombre del
formulario, y se guarda como archivo JSON para retomarlo más tarde.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import Field

from formlayout.codec import ImportResult, deserialize, serialize, validate_document
from formlayout.config import get_settings
from formlayout.errors import WorkspaceNotFoundError
from formlayout.models.base import TimestampedModel, generate_timestamp
from formlayout.models.layout import BlockLayout
from formlayout.models.schema import SchemaCatalog, SchemaField, SchemaTable
from formlayout.models.tree import FormTree, TreeNode
from formlayout.reorder import ReorderEngine

logger = logging.getLogger(__name__)


class FormWorkspace(TimestampedModel):
    """
    Formulario en construcción para un dataset del catálogo.

    Los modelos se pasan por referencia al motor de reordenamiento y al
    codec; no hay estado global.
    """

    name: str = ""  # Nombre del webform
    catalog_path: Optional[str] = None
    dataset_id: Optional[str] = None

    tree: FormTree = Field(default_factory=FormTree)
    layout: BlockLayout = Field(default_factory=BlockLayout)


    def engine(self) -> ReorderEngine:
        """Motor de arrastre sobre los modelos de este workspace."""
        return ReorderEngine(self.tree, self.layout)

    # ========================================================================
    # Selección de tablas y campos
    # ========================================================================

    def available_tables(self, catalog: SchemaCatalog) -> list[SchemaTable]:
        """Tablas del dataset que todavía no están en el árbol."""
        if self.dataset_id is None:
            return []
        dataset = catalog.get_dataset(self.dataset_id)
        if dataset is None:
            return []
        used = set(self.tree.table_ids())
        return [t for t in dataset.tables if t.id not in used]

    def available_fields(self, catalog: SchemaCatalog) -> list[SchemaField]:
        """Campos de la tabla seleccionada que aún no fueron ubicados."""
        table_id = self.tree.selected_table
        if table_id is None:
            return []
        table = catalog.table_by_id(table_id, self.dataset_id)
        if table is None:
            return []
        return [f for f in table.fields if not self.layout.is_placed(table_id, f.id)]

    # ========================================================================
    # Operaciones sobre el árbol
    # ========================================================================

    def add_table(self, table_id: str, label: str, title: str, as_root: bool = False) -> Optional[TreeNode]:
        """
        Agrega una tabla al árbol (como raíz o como hija).

        Returns:
            El nodo creado, o None si la tabla ya estaba o ya hay raíz
        """
        if self.tree.contains_table(table_id):
            logger.debug("Tabla %s ya presente en el árbol", table_id)
            return None
        if as_root:
            node = self.tree.add_root(table_id, label, title)
        else:
            node = self.tree.add_child(table_id, label, title)
        if node is not None:
            self.touch()
        return node

    def rename_table(self, table_id: str, label: str, title: str) -> bool:
        if self.tree.rename(table_id, label, title):
            self.touch()
            return True
        return False

    def remove_table(self, node_id: str) -> list[str]:
        """Quita un nodo (y su subárbol) junto con los campos de esas tablas."""
        removed = self.tree.remove(node_id)
        for table_id in removed:
            self.layout.remove_table(table_id)
        if removed:
            self.touch()
        return removed

    def select_table(self, table_id: Optional[str]) -> None:
        self.tree.select(table_id)

    def change_dataset(self, dataset_id: str) -> None:
        """Cambia de dataset descartando el formulario actual."""
        self.dataset_id = dataset_id
        self.tree.clear()
        self.layout.clear()
        self.touch()

    def clear_form(self) -> None:
        self.layout.clear()
        self.touch()

    # ========================================================================
    # Exportación / importación
    # ========================================================================

    def export_document(self, catalog: Optional[SchemaCatalog] = None, generated_at: Optional[str] = None) -> dict:
        return serialize(
            self.tree,
            self.layout,
            self.name,
            catalog=catalog,
            dataset_id=self.dataset_id,
            generated_at=generated_at,
        )

    def apply_import(self, document: Any, catalog: SchemaCatalog) -> ImportResult:
        """
        Reemplaza el formulario actual por el del documento.

        La estructura se valida antes de descartar nada: un documento
        inválido deja el workspace intacto.

        Raises:
            FormStructureError: Si el documento no tiene lista 'tables'
        """
        validate_document(document)
        result = deserialize(document, catalog, self.dataset_id)

        if result.webform_name:
            self.name = result.webform_name

        self.layout.clear()
        self.tree.clear()

        root_entries = [t for t in result.tables if t.is_root]
        if root_entries:
            root = root_entries[0]
            self.tree.add_root(root.table_id, root.label, root.title)
        for table in result.tables:
            if not self.tree.contains_table(table.table_id):
                self.tree.add_child(table.table_id, table.label, table.title)

        self.layout.add_fields(result.placed_fields)
        if result.first_table_id:
            self.tree.select(result.first_table_id)

        self.touch()
        return result


# ============================================================================
# Gestor de Workspaces
# ============================================================================

class WorkspaceManager:
    """Gestiona formularios en edición guardados como JSON."""

    def __init__(self, workspaces_dir: Optional[Path] = None):
        """
        Inicializa el gestor de workspaces.

        Args:
            workspaces_dir: Directorio para guardar workspaces.
                           Default: ~/.formlayout/workspaces/
        """
        if workspaces_dir is None:
            workspaces_dir = get_settings().workspaces_dir

        self.workspaces_dir = Path(workspaces_dir)
        self.workspaces_dir.mkdir(parents=True, exist_ok=True)

    def _workspace_path(self, workspace_id: str) -> Path:
        """Retorna la ruta del archivo de workspace."""
        return self.workspaces_dir / f"{workspace_id}.json"

    def create(
        self,
        name: str,
        catalog_path: Optional[str] = None,
        dataset_id: Optional[str] = None,
    ) -> FormWorkspace:
        """
        Crea y guarda un workspace vacío.

        Args:
            name: Nombre del webform
            catalog_path: Archivo de esquema asociado
            dataset_id: Dataset activo

        Returns:
            FormWorkspace creado
        """
        workspace = FormWorkspace(
            name=name,
            catalog_path=catalog_path,
            dataset_id=dataset_id,
        )
        self.save(workspace)
        return workspace

    def save(self, workspace: FormWorkspace) -> Path:
        """Guarda un workspace a disco."""
        workspace.updated_at = generate_timestamp()
        path = self._workspace_path(workspace.id)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(workspace.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

        logger.debug("Workspace %s guardado en %s", workspace.id, path)
        return path

    def load(self, workspace_id: str) -> FormWorkspace:
        """Carga un workspace desde disco."""
        path = self._workspace_path(workspace_id)

        if not path.exists():
            raise WorkspaceNotFoundError(f"Workspace no encontrado: {workspace_id}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return FormWorkspace.model_validate(data)

    def get(self, workspace_id: str) -> Optional[FormWorkspace]:
        """Obtiene un workspace por ID (parcial o completo)."""
        path = self._workspace_path(workspace_id)
        if path.exists():
            return self.load(workspace_id)

        for candidate in sorted(self.workspaces_dir.glob(f"{workspace_id}*.json")):
            return self.load(candidate.stem)
        return None

    def list_workspaces(self) -> list[dict]:
        """Lista los workspaces guardados (resumen, más recientes primero)."""
        workspaces = []
        for path in self.workspaces_dir.glob("*.json"):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Workspace ilegible %s: %s", path.name, e)
                continue

            layout = data.get("layout") or {}
            fields = layout.get("fields") or []
            workspaces.append({
                "id": data.get("id", path.stem),
                "name": data.get("name", ""),
                "dataset_id": data.get("dataset_id"),
                "n_fields": len(fields),
                "n_tables": len({f.get("table_id") for f in fields}),
                "updated_at": data.get("updated_at", ""),
            })

        return sorted(workspaces, key=lambda w: w["updated_at"], reverse=True)

    def delete(self, workspace_id: str) -> bool:
        """Elimina un workspace."""
        path = self._workspace_path(workspace_id)
        if path.exists():
            path.unlink()
            return True
        return False
