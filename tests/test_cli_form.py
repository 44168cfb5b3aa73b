"""
Tests para comandos CLI de formularios (cli/form/).

Usa typer.testing.CliRunner para simular invocaciones CLI.
"""

import json

import pytest
from typer.testing import CliRunner

from formlayout.cli import app
from formlayout.cli.form.batch import build_from_recipe
from formlayout.cli.form.fields import parse_property_value
from formlayout.cli.form.io import default_export_filename


runner = CliRunner()


@pytest.fixture
def mock_manager(temp_manager):
    """Parchea get_workspace_manager para usar directorio temporal."""
    import formlayout.cli.form.base as base_module
    original = base_module._workspace_manager
    base_module._workspace_manager = temp_manager
    yield temp_manager
    base_module._workspace_manager = original


@pytest.fixture
def ws_id(mock_manager, catalog_file):
    """Formulario creado por CLI con Orders como raíz."""
    result = runner.invoke(app, ["form", "create", "Pedidos", "--schema", str(catalog_file), "--dataset", "ds1"])
    assert result.exit_code == 0, result.output
    workspace_id = mock_manager.list_workspaces()[0]["id"]

    result = runner.invoke(app, ["form", "add-table", workspace_id, "Orders", "--root", "--label", "ord", "--title", "Order Info"])
    assert result.exit_code == 0, result.output
    return workspace_id


def invoke(*args):
    return runner.invoke(app, [str(a) for a in args])


class TestFormCreate:
    """Tests para form create / list / show / delete."""

    def test_create(self, mock_manager, catalog_file):
        result = invoke("form", "create", "Pedidos", "--schema", catalog_file)

        assert result.exit_code == 0
        assert "Formulario creado" in result.output
        listed = mock_manager.list_workspaces()
        assert len(listed) == 1
        assert listed[0]["dataset_id"] == "ds1"

    def test_create_unknown_dataset(self, mock_manager, catalog_file):
        result = invoke("form", "create", "Pedidos", "--schema", catalog_file, "--dataset", "nope")
        assert result.exit_code == 1
        assert mock_manager.list_workspaces() == []

    def test_create_missing_schema(self, mock_manager, tmp_path):
        result = invoke("form", "create", "Pedidos", "--schema", tmp_path / "nope.json")
        assert result.exit_code == 1

    def test_list_empty(self, mock_manager):
        result = invoke("form", "list")
        assert result.exit_code == 0
        assert "No hay formularios" in result.output

    def test_show(self, ws_id):
        invoke("form", "place", ws_id, "Amount")
        result = invoke("form", "show", ws_id)

        assert result.exit_code == 0
        assert "Order Info" in result.output
        assert "Amount" in result.output

    def test_show_missing(self, mock_manager):
        result = invoke("form", "show", "nope")
        assert result.exit_code == 1
        assert "no encontrado" in result.output

    def test_delete_force(self, ws_id, mock_manager):
        result = invoke("form", "delete", ws_id, "--force")
        assert result.exit_code == 0
        assert mock_manager.get(ws_id) is None

    def test_delete_cancelled(self, ws_id, mock_manager):
        result = runner.invoke(app, ["form", "delete", ws_id], input="n\n")
        assert result.exit_code == 0
        assert mock_manager.get(ws_id) is not None


class TestFormDataset:
    """Tests para form dataset."""

    def test_change_dataset_clears_form(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "Amount")

        result = invoke("form", "dataset", ws_id, "ds2", "--force")
        assert result.exit_code == 0, result.output

        workspace = mock_manager.get(ws_id)
        assert workspace.dataset_id == "ds2"
        assert workspace.tree.tree_structure == []
        assert workspace.tree.selected_table is None
        assert workspace.layout.fields == []

    def test_new_dataset_tables_available(self, ws_id, mock_manager):
        invoke("form", "dataset", ws_id, "ds2", "--force")

        result = invoke("form", "add-table", ws_id, "Other", "--root")
        assert result.exit_code == 0, result.output
        assert mock_manager.get(ws_id).tree.root.table_id == "t_other"

    def test_unknown_dataset(self, ws_id, mock_manager):
        result = invoke("form", "dataset", ws_id, "nope", "--force")
        assert result.exit_code == 1
        workspace = mock_manager.get(ws_id)
        assert workspace.dataset_id == "ds1"
        assert workspace.tree.contains_table("t_orders")

    def test_cancelled(self, ws_id, mock_manager):
        result = runner.invoke(app, ["form", "dataset", ws_id, "ds2"], input="n\n")
        assert result.exit_code == 0
        assert mock_manager.get(ws_id).dataset_id == "ds1"


class TestTableCommands:
    """Tests para comandos del árbol de tablas."""

    def test_add_root_selects_table(self, ws_id, mock_manager):
        workspace = mock_manager.get(ws_id)
        assert workspace.tree.has_root_table
        assert workspace.tree.selected_table == "t_orders"
        assert workspace.tree.root.label == "ord"

    def test_second_root_rejected(self, ws_id, mock_manager):
        result = invoke("form", "add-table", ws_id, "Lines", "--root")
        assert result.exit_code == 1
        assert not mock_manager.get(ws_id).tree.contains_table("t_lines")

    def test_duplicate_table_rejected(self, ws_id):
        result = invoke("form", "add-table", ws_id, "t_orders")
        assert result.exit_code == 1

    def test_unknown_table(self, ws_id):
        result = invoke("form", "add-table", ws_id, "Nope")
        assert result.exit_code == 1

    def test_rename(self, ws_id, mock_manager):
        result = invoke("form", "rename-table", ws_id, "Orders", "--label", "ped", "--title", "Pedido")
        assert result.exit_code == 0
        assert mock_manager.get(ws_id).tree.root.title == "Pedido"

    def test_remove_child(self, ws_id, mock_manager):
        invoke("form", "add-table", ws_id, "Lines")
        invoke("form", "place", ws_id, "Product")
        node = mock_manager.get(ws_id).tree.find_by_table("t_lines")

        result = invoke("form", "remove-table", ws_id, node.id)
        assert result.exit_code == 0

        workspace = mock_manager.get(ws_id)
        assert workspace.tree.table_ids() == ["t_orders"]
        assert workspace.layout.fields == []
        assert workspace.tree.selected_table is None

    def test_select(self, ws_id, mock_manager):
        invoke("form", "add-table", ws_id, "Lines")
        result = invoke("form", "select", ws_id, "Orders")
        assert result.exit_code == 0
        assert mock_manager.get(ws_id).tree.selected_table == "t_orders"

    def test_select_table_not_in_form(self, ws_id):
        assert invoke("form", "select", ws_id, "Payments").exit_code == 1

    def test_reorder_tab(self, ws_id, mock_manager):
        invoke("form", "add-table", ws_id, "Lines")
        invoke("form", "add-table", ws_id, "Payments")

        result = invoke("form", "reorder-tab", ws_id, "Payments", "Lines")
        assert result.exit_code == 0
        children = mock_manager.get(ws_id).tree.root.children
        assert [c.table_id for c in children] == ["t_payments", "t_lines"]


class TestFieldCommands:
    """Tests para comandos de campos."""

    def test_fields_lists_unplaced(self, ws_id):
        invoke("form", "place", ws_id, "Amount")
        result = invoke("form", "fields", ws_id)

        assert result.exit_code == 0
        assert "CustomerName" in result.output
        assert "Amount" not in result.output

    def test_place_and_join_block(self, ws_id, mock_manager):
        assert invoke("form", "place", ws_id, "CustomerName").exit_code == 0
        assert invoke("form", "place", ws_id, "Amount", "--block", "1").exit_code == 0

        fields = mock_manager.get(ws_id).layout.fields
        assert [(f.name, f.block_id) for f in fields] == [("CustomerName", 1), ("Amount", 1)]

    def test_place_twice_rejected(self, ws_id):
        invoke("form", "place", ws_id, "Amount")
        result = invoke("form", "place", ws_id, "Amount")
        assert result.exit_code == 1
        assert "ya está ubicado" in result.output

    def test_place_unknown_field(self, ws_id):
        assert invoke("form", "place", ws_id, "Nope").exit_code == 1

    def test_place_without_selection(self, mock_manager, catalog_file):
        invoke("form", "create", "Vacío", "--schema", catalog_file)
        workspace_id = mock_manager.list_workspaces()[0]["id"]
        result = invoke("form", "place", workspace_id, "Amount")
        assert result.exit_code == 1
        assert "No hay tabla seleccionada" in result.output

    def test_move_and_reorder_fields(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "CustomerName")
        invoke("form", "place", ws_id, "Amount")
        ids = {f.name: f.form_id for f in mock_manager.get(ws_id).layout.fields}

        assert invoke("form", "move", ws_id, ids["Amount"], 1).exit_code == 0
        assert invoke("form", "reorder-fields", ws_id, ids["Amount"], ids["CustomerName"]).exit_code == 0

        fields = mock_manager.get(ws_id).layout.fields
        assert [(f.name, f.block_id) for f in fields] == [("Amount", 1), ("CustomerName", 1)]

    def test_reorder_block(self, ws_id, mock_manager):
        for name in ("CustomerName", "Amount", "Status"):
            invoke("form", "place", ws_id, name)

        result = invoke("form", "reorder-block", ws_id, 2, 1)
        assert result.exit_code == 0
        assert "2, 1, 3" in result.output
        assert mock_manager.get(ws_id).layout.block_ids("t_orders") == [2, 1, 3]

    def test_reorder_same_block_is_noop(self, ws_id):
        invoke("form", "place", ws_id, "Amount")
        result = invoke("form", "reorder-block", ws_id, 1, 1)
        assert result.exit_code == 0
        assert "Sin cambios" in result.output

    def test_set_and_clear(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "Amount")
        form_id = mock_manager.get(ws_id).layout.fields[0].form_id

        assert invoke("form", "set", ws_id, form_id, "custom_title", "Monto").exit_code == 0
        assert mock_manager.get(ws_id).layout.fields[0].custom_title == "Monto"

        assert invoke("form", "set", ws_id, form_id, "custom-title", "--clear").exit_code == 0
        assert mock_manager.get(ws_id).layout.fields[0].custom_title is None

    def test_set_unknown_property(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "Amount")
        form_id = mock_manager.get(ws_id).layout.fields[0].form_id
        result = invoke("form", "set", ws_id, form_id, "block_id", "3")
        assert result.exit_code == 1
        assert "Propiedad desconocida" in result.output

    def test_set_invalid_bool(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "Amount")
        form_id = mock_manager.get(ws_id).layout.fields[0].form_id
        assert invoke("form", "set", ws_id, form_id, "is_primary", "quizás").exit_code == 1

    def test_remove_field(self, ws_id, mock_manager):
        invoke("form", "place", ws_id, "Amount")
        form_id = mock_manager.get(ws_id).layout.fields[0].form_id

        assert invoke("form", "remove-field", ws_id, form_id).exit_code == 0
        workspace = mock_manager.get(ws_id)
        assert workspace.layout.fields == []
        assert workspace.layout.block_order == {}


class TestParsePropertyValue:
    """Tests para conversión de valores de propiedades."""

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("Sí", True), ("0", False), ("off", False),
    ])
    def test_bools(self, raw, expected):
        assert parse_property_value("custom_required", raw) is expected

    def test_invalid_bool(self):
        with pytest.raises(ValueError):
            parse_property_value("is_primary", "tal vez")

    def test_level(self):
        assert parse_property_value("custom_level", "2") == 2

    def test_codelist(self):
        assert parse_property_value("custom_codelist_items", "a, b,,c") == ["a", "b", "c"]

    def test_dependency(self):
        assert parse_property_value("dependency", "Status=Open,Closed") == {
            "field": "Status", "value": ["Open", "Closed"],
        }
        assert parse_property_value("dependency", "Status") == {"field": "Status", "value": None}

    def test_plain_text(self):
        assert parse_property_value("custom_title", "Monto") == "Monto"


class TestExportImport:
    """Tests para form export / import."""

    def test_export_file(self, ws_id, tmp_path):
        invoke("form", "place", ws_id, "CustomerName")
        invoke("form", "place", ws_id, "Amount", "--block", "1")
        output = tmp_path / "pedidos.json"

        result = invoke("form", "export", ws_id, "-o", output)
        assert result.exit_code == 0

        doc = json.loads(output.read_text(encoding="utf-8"))
        assert doc["webformName"] == "Pedidos"
        assert doc["tables"][0]["name"] == "Orders"
        assert doc["overview"][0]["type"] == "BLOCK"

    def test_export_stdout(self, ws_id):
        invoke("form", "place", ws_id, "Amount")
        result = invoke("form", "export", ws_id, "-o", "-")
        assert result.exit_code == 0
        assert json.loads(result.output)["metadata"]["totalFields"] == 1

    def test_import_restores(self, ws_id, mock_manager, tmp_path):
        invoke("form", "place", ws_id, "CustomerName")
        invoke("form", "place", ws_id, "Amount")
        output = tmp_path / "pedidos.json"
        invoke("form", "export", ws_id, "-o", output)

        workspace = mock_manager.get(ws_id)
        workspace.clear_form()
        mock_manager.save(workspace)

        result = invoke("form", "import", ws_id, output)
        assert result.exit_code == 0
        assert "2 campos" in result.output
        assert [f.name for f in mock_manager.get(ws_id).layout.fields] == ["CustomerName", "Amount"]

    def test_import_zero_matches(self, ws_id, tmp_path):
        path = tmp_path / "otro.json"
        path.write_text(json.dumps({"tables": [{"name": "Orders", "elements": [{"type": "FIELD", "name": "Missing"}]}]}))

        result = invoke("form", "import", ws_id, path)
        assert result.exit_code == 0
        assert "Ningún campo coincide" in result.output

    def test_import_structural_error_keeps_form(self, ws_id, mock_manager, tmp_path):
        invoke("form", "place", ws_id, "Amount")
        path = tmp_path / "roto.json"
        path.write_text(json.dumps({"webformName": "Otro"}))

        result = invoke("form", "import", ws_id, path)
        assert result.exit_code == 1
        workspace = mock_manager.get(ws_id)
        assert workspace.name == "Pedidos"
        assert len(workspace.layout.fields) == 1

    def test_import_invalid_json(self, ws_id, tmp_path):
        path = tmp_path / "roto.json"
        path.write_text("{roto")
        assert invoke("form", "import", ws_id, path).exit_code == 1

    @pytest.mark.parametrize("name, expected", [
        ("Pedidos 2024", "Pedidos_2024.json"),
        ("a/b", "a_b.json"),
        ("", "form-config.json"),
    ])
    def test_default_export_filename(self, name, expected):
        assert default_export_filename(name) == expected


RECIPE = {
    "name": "Pedidos",
    "dataset": "ds1",
    "tables": [
        {
            "table": "Orders",
            "root": True,
            "label": "ord",
            "title": "Order Info",
            "blocks": [
                ["CustomerName", "Amount"],
                {"field": "Notes", "set": {"custom_title": "Observaciones", "is_primary": "true"}},
                "Missing",
            ],
        },
        {"table": "Lines", "label": "lin", "title": "Lines", "blocks": ["Product"]},
        {"table": "Nope"},
    ],
}


class TestBuild:
    """Tests para construcción desde receta YAML."""

    def test_build_from_recipe(self, catalog):
        workspace, warnings = build_from_recipe(RECIPE, catalog)

        assert workspace.tree.root.table_id == "t_orders"
        assert [c.table_id for c in workspace.tree.root.children] == ["t_lines"]
        assert workspace.tree.selected_table == "t_orders"
        assert [(f.name, f.block_id) for f in workspace.layout.fields_for_table("t_orders")] == [
            ("CustomerName", 1), ("Amount", 1), ("Notes", 2),
        ]
        notes = workspace.layout.fields_for_table("t_orders")[-1]
        assert notes.custom_title == "Observaciones"
        assert notes.is_primary is True
        assert len(warnings) == 2

    def test_unknown_set_property_warns(self, catalog):
        """Una propiedad desconocida en 'set' se avisa y el campo queda ubicado."""
        recipe = {
            "name": "Pedidos",
            "dataset": "ds1",
            "tables": [{
                "table": "Orders",
                "root": True,
                "blocks": [{"field": "Notes", "set": {"bogus": "x", "custom_level": "abc"}}],
            }],
        }
        workspace, warnings = build_from_recipe(recipe, catalog)

        placed = workspace.layout.fields_for_table("t_orders")
        assert [f.name for f in placed] == ["Notes"]
        assert placed[0].custom_level is None
        assert len(warnings) == 2
        assert any("bogus" in w for w in warnings)

    def test_build_command_unknown_property(self, mock_manager, catalog_file, tmp_path):
        import yaml

        recipe = {
            "name": "Pedidos",
            "dataset": "ds1",
            "tables": [{"table": "Orders", "root": True,
                        "blocks": [{"field": "Notes", "set": {"bogus": "x"}}]}],
        }
        recipe_path = tmp_path / "receta.yaml"
        recipe_path.write_text(yaml.safe_dump(recipe), encoding="utf-8")

        result = invoke("form", "build", recipe_path, "--schema", catalog_file)
        assert result.exit_code == 0, result.output
        assert len(mock_manager.list_workspaces()) == 1

    def test_build_command(self, mock_manager, catalog_file, tmp_path):
        import yaml

        recipe_path = tmp_path / "receta.yaml"
        recipe_path.write_text(yaml.safe_dump(RECIPE), encoding="utf-8")
        output = tmp_path / "pedidos.json"

        result = invoke("form", "build", recipe_path, "--schema", catalog_file, "-o", output)
        assert result.exit_code == 0, result.output
        assert len(mock_manager.list_workspaces()) == 1

        doc = json.loads(output.read_text(encoding="utf-8"))
        assert [t["name"] for t in doc["tables"]] == ["Orders", "Lines"]

    def test_build_missing_recipe(self, mock_manager, catalog_file, tmp_path):
        result = invoke("form", "build", tmp_path / "nope.yaml", "--schema", catalog_file)
        assert result.exit_code == 1
