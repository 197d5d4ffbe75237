# Copyright (c) 2025 Trae AI. All rights reserved.

import yaml
from unittest.mock import patch
from typer.testing import CliRunner
from trailer_helper.cli.main import app
from trailer_helper.core.exceptions import CatalogError
from trailer_helper.core.models import ItemKind
from trailer_helper.core.provider_ids import ProviderIdModel, read_provider_id_model

runner = CliRunner()


def test_add_stamps_provider_id(config_file, library_repo, library_dir):
    result = runner.invoke(app, [
        "add", "Foo Bar", str(library_dir / "Foo Bar"),
        "--trailer-url", "http://x/t.mp4",
        "--provider", "JavBus", "--pid", "ABP-123",
        "--config-path", str(config_file),
    ])

    assert result.exit_code == 0, result.output
    items = library_repo.get_all()
    assert len(items) == 1
    assert items[0].trailer_url == "http://x/t.mp4"
    assert read_provider_id_model(items[0], "JavTube") == ProviderIdModel(provider="JavBus", id="ABP-123")

def test_run_generates_stubs(config_file, library_repo, make_item):
    item = library_repo.save(make_item("Foo Bar", "http://x/t.mp4"))

    result = runner.invoke(app, ["run", "--config-path", str(config_file)])

    assert result.exit_code == 0, result.output
    assert (item.container_path / "trailers" / "Foo-Trailer.strm").read_text() == "http://x/t.mp4"
    assert "1 created" in result.output

def test_run_disabled(tmp_path, db_path, library_repo, make_item):
    config_path = tmp_path / "disabled.yaml"
    config_path.write_text(yaml.safe_dump({"database_path": str(db_path), "enable_trailers": False}), encoding="utf-8")
    item = library_repo.save(make_item("Foo Bar", "http://x/t.mp4"))

    result = runner.invoke(app, ["run", "--config-path", str(config_path)])

    assert result.exit_code == 0
    assert "disabled" in result.output
    assert not (item.container_path / "trailers").exists()

def test_run_with_missing_config_fails(tmp_path):
    result = runner.invoke(app, ["run", "--config-path", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "Error loading config" in result.output

def test_import_items(tmp_path, config_file, library_repo, library_dir):
    items_file = tmp_path / "items.yaml"
    items_file.write_text(yaml.safe_dump([
        {"name": "Foo Bar", "container_path": str(library_dir / "foo"), "trailer_url": "http://x/f.mp4", "pid": "F-1"},
        {"name": "Some Show", "container_path": str(library_dir / "show"), "kind": "Series"},
        {"container_path": str(library_dir / "nameless")},
    ]), encoding="utf-8")

    result = runner.invoke(app, ["import", str(items_file), "--config-path", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Imported 2 items" in result.output
    items = library_repo.get_all()
    assert [i.kind for i in items] == [ItemKind.MOVIE, ItemKind.SERIES]
    assert read_provider_id_model(items[0], "JavTube").id == "F-1"

def test_list_and_pid(config_file, library_repo, make_item):
    item = make_item("Foo Bar", "http://x/t.mp4", provider_ids={"JavTube": "JavBus:ABP-123"})
    library_repo.save(item)

    listed = runner.invoke(app, ["list", "--config-path", str(config_file)])
    shown = runner.invoke(app, ["pid", str(item.id), "--config-path", str(config_file)])

    assert listed.exit_code == 0
    assert "Foo Bar" in listed.output
    assert "Found 1 items" in listed.output
    assert shown.exit_code == 0
    assert "ABP-123" in shown.output

def test_pid_unknown_item(config_file):
    result = runner.invoke(app, ["pid", "999", "--config-path", str(config_file)])

    assert result.exit_code == 1

def test_info(config_file):
    result = runner.invoke(app, ["info", "--config-path", str(config_file)])

    assert result.exit_code == 0
    assert "JavTubeGenerateTrailers" in result.output
    assert "daily at 01:00" in result.output

def test_import_null_pid_stays_empty(tmp_path, config_file, library_repo, library_dir):
    items_file = tmp_path / "items.yaml"
    items_file.write_text(
        f"- name: Foo Bar\n  container_path: {library_dir / 'foo'}\n  pid: null\n  provider: null\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["import", str(items_file), "--config-path", str(config_file)])

    assert result.exit_code == 0, result.output
    item = library_repo.get_all()[0]
    assert read_provider_id_model(item, "JavTube") == ProviderIdModel()
    assert item.provider_ids == {"JavTube": ""}

def test_run_catalog_failure_exits(config_file):
    with patch("trailer_helper.cli.main.LibraryRepository.query_items", side_effect=CatalogError("locked")):
        result = runner.invoke(app, ["run", "--config-path", str(config_file)])

    assert result.exit_code == 1
    assert "Catalog query failed" in result.output
