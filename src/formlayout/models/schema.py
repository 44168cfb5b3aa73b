"""
Catálogo de esquemas (datasets → tablas → campos).

El motor de formularios trata el catálogo como una consulta de solo
lectura; este módulo además sabe leerlo desde un archivo JSON, ya sea en
formato nativo o como exportación cruda de un esquema de dataset.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from formlayout.errors import CatalogError

logger = logging.getLogger(__name__)


class SchemaField(BaseModel):
    """Campo de una tabla del esquema (acepta claves camelCase o snake_case)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    type: str = "text"
    required: bool = False
    description: Optional[str] = None
    codelist_items: Optional[list[str]] = None
    level: Optional[int] = None
    read_only: Optional[bool] = None
    auto_increment: Optional[bool] = None
    is_visible: Optional[bool] = None
    pk: Optional[bool] = None


class SchemaTable(BaseModel):
    """Tabla del esquema con sus campos."""
    id: str
    name: str
    fields: list[SchemaField] = Field(default_factory=list)

    def get_field(self, field_id: str) -> Optional[SchemaField]:
        """Obtiene un campo por ID."""
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def field_by_name(self, name: str) -> Optional[SchemaField]:
        """Obtiene un campo por nombre (coincidencia exacta)."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


class Dataset(BaseModel):
    """Dataset del catálogo."""
    id: str
    name: str
    tables: list[SchemaTable] = Field(default_factory=list)

    def get_table(self, table_id: str) -> Optional[SchemaTable]:
        """Obtiene una tabla por ID."""
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def table_by_name(self, name: str) -> Optional[SchemaTable]:
        """Obtiene una tabla por nombre."""
        for table in self.tables:
            if table.name == name:
                return table
        return None


class SchemaCatalog(BaseModel):
    """Catálogo completo: lista de datasets."""
    datasets: list[Dataset] = Field(default_factory=list)

    def list_datasets(self) -> list[Dataset]:
        return list(self.datasets)

    def get_dataset(self, dataset_id: str) -> Optional[Dataset]:
        """Obtiene un dataset por ID."""
        for dataset in self.datasets:
            if dataset.id == dataset_id:
                return dataset
        return None

    def require_dataset(self, dataset_id: str) -> Dataset:
        """Como get_dataset, pero falla si el dataset no existe."""
        dataset = self.get_dataset(dataset_id)
        if dataset is None:
            raise CatalogError(f"Dataset no encontrado: {dataset_id}")
        return dataset

    def table_by_id(self, table_id: str, dataset_id: Optional[str] = None) -> Optional[SchemaTable]:
        """
        Busca una tabla por ID.

        Si se indica dataset_id la búsqueda se limita a ese dataset.
        """
        for dataset in self.datasets:
            if dataset_id is not None and dataset.id != dataset_id:
                continue
            table = dataset.get_table(table_id)
            if table is not None:
                return table
        return None

    def table_by_name(self, dataset_id: str, name: str) -> Optional[SchemaTable]:
        """Busca una tabla por nombre dentro de un dataset."""
        dataset = self.get_dataset(dataset_id)
        if dataset is None:
            return None
        return dataset.table_by_name(name)


# ============================================================================
# Lectura desde archivo
# ============================================================================

_REMOTE_TYPE_MAP = {
    "text": "text",
    "string": "text",
    "email": "email",
    "number": "number",
    "integer": "number",
    "decimal": "number",
    "date": "date",
    "datetime": "date",
    "boolean": "checkbox",
    "textarea": "textarea",
    "longtext": "textarea",
    "select": "select",
    "dropdown": "select",
    "phone": "tel",
    "telephone": "tel",
}


def map_remote_type(remote_type: Optional[str]) -> str:
    """Normaliza un tipo de campo remoto a un tipo de formulario."""
    if not remote_type:
        return "text"
    return _REMOTE_TYPE_MAP.get(str(remote_type).lower(), "text")


def _parse_remote_fields(fields_data: Any) -> list[SchemaField]:
    if not isinstance(fields_data, list):
        return []

    fields = []
    for raw in fields_data:
        field_id = raw.get("id") or raw.get("fieldSchemaId") or ""
        fields.append(SchemaField(
            id=str(field_id),
            name=raw.get("name") or raw.get("headerName") or "Unnamed Field",
            type=map_remote_type(raw.get("type") or raw.get("typeData")),
            required=bool(raw.get("required") or raw.get("requiredField") or False),
            description=raw.get("description") or "",
        ))
    return fields


def parse_remote_schema(data: dict, dataset_id: str = "dataset", dataset_name: str = "") -> Dataset:
    """
    Convierte una exportación cruda de esquema (tableSchemas) en un Dataset.

    Args:
        data: Dict con clave "tableSchemas"
        dataset_id: ID a asignar al dataset resultante
        dataset_name: Nombre del dataset (default: dataset_id)

    Returns:
        Dataset con tablas y campos normalizados
    """
    tables = []
    for index, raw in enumerate(data.get("tableSchemas") or []):
        table_id = raw.get("idTableSchema") or raw.get("tableSchemaId") or raw.get("id")
        record = raw.get("recordSchema") or {}
        tables.append(SchemaTable(
            id=str(table_id) if table_id is not None else f"table_{index}",
            name=raw.get("nameTableSchema") or raw.get("name") or "Unnamed Table",
            fields=_parse_remote_fields(record.get("fieldSchema") or []),
        ))

    return Dataset(
        id=str(data.get("idDataSetSchema") or dataset_id),
        name=dataset_name or str(data.get("nameDatasetSchema") or dataset_id),
        tables=tables,
    )


def load_catalog(path: Union[str, Path]) -> SchemaCatalog:
    """
    Lee un catálogo de esquemas desde un archivo JSON.

    Acepta el formato nativo ({"datasets": [...]}) o la exportación cruda
    de un único dataset ({"tableSchemas": [...]}).

    Raises:
        CatalogError: Si el archivo no existe o no es un catálogo válido
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Archivo de esquema no encontrado: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"JSON inválido en {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Formato de esquema no reconocido: {path}")

    try:
        if "datasets" in data:
            catalog = SchemaCatalog.model_validate(data)
        elif "tableSchemas" in data:
            catalog = SchemaCatalog(datasets=[parse_remote_schema(data, dataset_id=path.stem)])
        else:
            raise CatalogError(f"Formato de esquema no reconocido: {path}")
    except ValidationError as e:
        raise CatalogError(f"Esquema inválido en {path}: {e}") from e

    logger.debug(
        "Catálogo cargado desde %s: %d datasets",
        path, len(catalog.datasets),
    )
    return catalog
