"""
Tests para models/schema.py - Catálogo de esquemas.
"""

import json

import pytest

from formlayout.errors import CatalogError
from formlayout.models import SchemaField, load_catalog
from formlayout.models.schema import map_remote_type, parse_remote_schema


REMOTE_SCHEMA = {
    "idDataSetSchema": "remote-ds",
    "nameDatasetSchema": "Remoto",
    "tableSchemas": [
        {
            "idTableSchema": "rt1",
            "nameTableSchema": "Stations",
            "recordSchema": {
                "fieldSchema": [
                    {"id": "rf1", "name": "Code", "type": "STRING", "required": True},
                    {"fieldSchemaId": "rf2", "headerName": "Depth", "typeData": "decimal"},
                    {"id": "rf3", "name": "Kind", "type": "weird"},
                ]
            },
        },
        {"nameTableSchema": "Empty"},
    ],
}


class TestSchemaField:

    def test_camel_case_keys(self):
        field = SchemaField.model_validate({
            "id": "f1", "name": "Status", "codelistItems": ["A"], "readOnly": True,
        })
        assert field.codelist_items == ["A"]
        assert field.read_only is True

    def test_snake_case_keys(self):
        field = SchemaField(id="f1", name="Status", auto_increment=True)
        assert field.auto_increment is True
        assert field.type == "text"


class TestCatalogLookups:
    """Tests para búsquedas en el catálogo."""

    def test_list_datasets(self, catalog):
        assert [d.id for d in catalog.list_datasets()] == ["ds1", "ds2"]

    def test_table_by_id(self, catalog):
        assert catalog.table_by_id("t_orders").name == "Orders"
        assert catalog.table_by_id("t_orders", "ds2") is None

    def test_table_by_name(self, catalog):
        assert catalog.table_by_name("ds1", "Lines").id == "t_lines"
        assert catalog.table_by_name("nope", "Lines") is None

    def test_field_lookups(self, orders_table):
        assert orders_table.get_field("f_amount").name == "Amount"
        assert orders_table.field_by_name("Status").id == "f_status"
        assert orders_table.field_by_name("status") is None

    def test_require_dataset(self, catalog):
        assert catalog.require_dataset("ds2").name == "Otro"
        with pytest.raises(CatalogError):
            catalog.require_dataset("nope")


class TestRemoteSchema:
    """Tests para exportaciones crudas de esquema."""

    @pytest.mark.parametrize("remote, expected", [
        ("STRING", "text"),
        ("integer", "number"),
        ("boolean", "checkbox"),
        ("telephone", "tel"),
        ("longtext", "textarea"),
        ("something", "text"),
        (None, "text"),
    ])
    def test_map_remote_type(self, remote, expected):
        assert map_remote_type(remote) == expected

    def test_parse(self):
        dataset = parse_remote_schema(REMOTE_SCHEMA)

        assert dataset.id == "remote-ds"
        assert dataset.name == "Remoto"
        stations = dataset.tables[0]
        assert stations.id == "rt1"
        assert [(f.id, f.name, f.type) for f in stations.fields] == [
            ("rf1", "Code", "text"),
            ("rf2", "Depth", "number"),
            ("rf3", "Kind", "text"),
        ]
        assert stations.fields[0].required is True

    def test_table_without_id(self):
        dataset = parse_remote_schema(REMOTE_SCHEMA)
        assert dataset.tables[1].id == "table_1"
        assert dataset.tables[1].fields == []


class TestLoadCatalog:
    """Tests para lectura desde archivo."""

    def test_native_format(self, catalog_file):
        catalog = load_catalog(catalog_file)
        assert catalog.get_dataset("ds1").get_table("t_orders").field_by_name("Status").codelist_items == ["Open", "Closed"]

    def test_remote_format(self, tmp_path):
        path = tmp_path / "remoto.json"
        path.write_text(json.dumps(REMOTE_SCHEMA), encoding="utf-8")

        catalog = load_catalog(path)
        assert len(catalog.datasets) == 1
        assert catalog.table_by_name("remote-ds", "Stations") is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="no encontrado"):
            load_catalog(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "roto.json"
        path.write_text("{roto", encoding="utf-8")
        with pytest.raises(CatalogError, match="JSON inválido"):
            load_catalog(path)

    @pytest.mark.parametrize("content", [
        {"foo": 1},
        [1, 2, 3],
        {"datasets": [{"name": "sin id"}]},
    ])
    def test_unrecognized(self, tmp_path, content):
        path = tmp_path / "otro.json"
        path.write_text(json.dumps(content), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)
