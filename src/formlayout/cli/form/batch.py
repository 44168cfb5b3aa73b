"""
Comando batch para construir un formulario desde archivo YAML.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from formlayout.codec import to_json
from formlayout.errors import CatalogError, UnknownPropertyError
from formlayout.models import SchemaCatalog, load_catalog
from formlayout.reorder import BlockBody, DropResult, TableSurface, UnplacedField
from formlayout.workspace import FormWorkspace
from formlayout.cli.form.base import get_workspace_manager
from formlayout.cli.form.fields import parse_property_value
from formlayout.cli.theme import print_error, print_field, print_success, print_warning


def build_from_recipe(recipe: dict, catalog: SchemaCatalog, catalog_path: Optional[str] = None) -> tuple[FormWorkspace, list[str]]:
    """
    Construye un workspace a partir de una receta ya parseada.

    Returns:
        (workspace, advertencias) - las advertencias describen tablas o
        campos de la receta que no se pudieron aplicar
    """
    warnings = []
    dataset_id = recipe.get("dataset")
    if dataset_id is None and catalog.datasets:
        dataset_id = catalog.datasets[0].id
    dataset = catalog.require_dataset(dataset_id)

    workspace = FormWorkspace(
        name=recipe.get("name", ""),
        catalog_path=catalog_path,
        dataset_id=dataset.id,
    )
    engine = workspace.engine()

    for index, table_cfg in enumerate(recipe.get("tables") or []):
        table_name = table_cfg.get("table")
        schema_table = dataset.table_by_name(table_name) or dataset.get_table(str(table_name))
        if schema_table is None:
            warnings.append(f"Tabla no encontrada: {table_name}")
            continue

        as_root = bool(table_cfg.get("root", False)) and index == 0
        node = workspace.add_table(
            schema_table.id,
            table_cfg.get("label", schema_table.name),
            table_cfg.get("title", schema_table.name),
            as_root=as_root,
        )
        if node is None:
            warnings.append(f"Tabla repetida u omitida: {table_name}")
            continue
        workspace.select_table(schema_table.id)

        # Cada entrada de "blocks" es una fila: un campo o una lista de campos
        for row in table_cfg.get("blocks") or []:
            entries = row if isinstance(row, list) else [row]
            block_id = None
            for entry in entries:
                entry_cfg = entry if isinstance(entry, dict) else {"field": entry}
                schema_field = schema_table.field_by_name(str(entry_cfg.get("field")))
                if schema_field is None:
                    warnings.append(f"Campo no encontrado: {schema_table.name}.{entry_cfg.get('field')}")
                    continue

                target = TableSurface() if block_id is None else BlockBody(block_id, schema_table.id)
                if engine.drag(UnplacedField(schema_field), target) is not DropResult.PLACED:
                    warnings.append(f"Campo repetido: {schema_table.name}.{schema_field.name}")
                    continue
                placed = workspace.layout.fields[-1]
                block_id = placed.block_id

                for prop, raw in (entry_cfg.get("set") or {}).items():
                    try:
                        value = raw if not isinstance(raw, str) else parse_property_value(prop, raw)
                        workspace.layout.update(placed.form_id, prop, value)
                    except (UnknownPropertyError, ValueError) as e:
                        warnings.append(f"{schema_table.name}.{schema_field.name}: {e}")

    first = workspace.tree.root or (workspace.tree.tree_structure[0] if workspace.tree.tree_structure else None)
    workspace.select_table(first.table_id if first else None)
    return workspace, warnings


def form_build(
    recipe_file: Annotated[str, typer.Argument(help="Archivo YAML con la receta del formulario")],
    schema: Annotated[str, typer.Option("--schema", "-s", help="Archivo JSON del esquema")],
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Exportar también el documento JSON")] = None,
):
    """
    Construye un formulario completo desde archivo YAML.

    Formato del archivo YAML:
    ```yaml
    name: "Pedidos"
    dataset: ds1
    tables:
      - table: Orders
        root: true
        label: ord
        title: Order Info
        blocks:
          - [CustomerName, Amount]
          - field: Notes
            set:
              custom_title: Observaciones
      - table: Lines
        label: lin
        title: Lines
        blocks:
          - Product
    ```

    Ejemplo:
        formlayout form build pedidos.yaml --schema esquema.json -o pedidos.json
    """
    import yaml

    recipe_path = Path(recipe_file)
    if not recipe_path.exists():
        print_error(f"Archivo no encontrado: {recipe_file}")
        raise typer.Exit(1)

    with open(recipe_path, "r", encoding="utf-8") as f:
        recipe = yaml.safe_load(f) or {}

    try:
        catalog = load_catalog(schema)
        workspace, warnings = build_from_recipe(recipe, catalog, catalog_path=str(schema))
    except (CatalogError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    get_workspace_manager().save(workspace)

    for warning in warnings:
        print_warning(warning)
    print_success(f"Formulario construido [{workspace.id}]")
    print_field("Tablas", len(workspace.tree.table_ids()))
    print_field("Campos", len(workspace.layout.fields))

    if output:
        Path(output).write_text(to_json(workspace.export_document(catalog)) + "\n", encoding="utf-8")
        print_success(f"Documento exportado: {output}")
