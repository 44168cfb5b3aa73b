"""Configuración de pytest para tests de formlayout."""

import json

import pytest

from formlayout.models import SchemaCatalog
from formlayout.workspace import WorkspaceManager


CATALOG_DATA = {
    "datasets": [
        {
            "id": "ds1",
            "name": "Ventas",
            "tables": [
                {
                    "id": "t_orders",
                    "name": "Orders",
                    "fields": [
                        {"id": "f_name", "name": "CustomerName", "type": "text", "required": True},
                        {"id": "f_amount", "name": "Amount", "type": "number"},
                        {"id": "f_status", "name": "Status", "type": "codelist",
                         "codelistItems": ["Open", "Closed"]},
                        {"id": "f_notes", "name": "Notes", "type": "textarea",
                         "description": "Free notes"},
                    ],
                },
                {
                    "id": "t_lines",
                    "name": "Lines",
                    "fields": [
                        {"id": "f_product", "name": "Product", "type": "text"},
                        {"id": "f_qty", "name": "Quantity", "type": "number_integer"},
                    ],
                },
                {
                    "id": "t_payments",
                    "name": "Payments",
                    "fields": [
                        {"id": "f_method", "name": "Method", "type": "text"},
                    ],
                },
            ],
        },
        {
            "id": "ds2",
            "name": "Otro",
            "tables": [
                {"id": "t_other", "name": "Other", "fields": [{"id": "f_foo", "name": "Foo"}]},
            ],
        },
    ]
}


@pytest.fixture
def catalog():
    """Catálogo de ejemplo con dos datasets."""
    return SchemaCatalog.model_validate(CATALOG_DATA)


@pytest.fixture
def orders_table(catalog):
    return catalog.table_by_id("t_orders", "ds1")


@pytest.fixture
def catalog_file(tmp_path):
    """Catálogo de ejemplo escrito a disco."""
    path = tmp_path / "esquema.json"
    path.write_text(json.dumps(CATALOG_DATA), encoding="utf-8")
    return path


@pytest.fixture
def temp_manager(tmp_path):
    """WorkspaceManager con directorio temporal."""
    return WorkspaceManager(workspaces_dir=tmp_path / "workspaces")
