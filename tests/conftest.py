# Copyright (c) 2025 Trae AI. All rights reserved.

import pytest
import yaml
from pathlib import Path
from trailer_helper.core.config import Config
from trailer_helper.core.models import MediaItem
from trailer_helper.infrastructure.db.database import Database
from trailer_helper.infrastructure.db.repository import LibraryRepository, LogRepository

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"

@pytest.fixture
def database(db_path):
    return Database(db_path)

@pytest.fixture
def library_repo(database):
    return LibraryRepository(database)

@pytest.fixture
def log_repo(database):
    return LogRepository(database)

@pytest.fixture
def config(db_path):
    return Config(database_path=db_path)

@pytest.fixture
def config_file(tmp_path, db_path):
    path = tmp_path / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"database_path": str(db_path), "plugin_name": "JavTube"}, f)
    return path

@pytest.fixture
def library_dir(tmp_path):
    path = tmp_path / "library"
    path.mkdir()
    return path

@pytest.fixture
def make_item(library_dir):
    """
    Builds a managed movie whose container folder exists on disk.
    """
    def _make(name: str, trailer_url: str = None, folder: str = None, provider_ids=None, **kwargs):
        container = library_dir / (folder or name)
        container.mkdir(parents=True, exist_ok=True)
        return MediaItem(
            name=name,
            container_path=container,
            remote_trailers=[trailer_url] if trailer_url else [],
            provider_ids={"JavTube": ""} if provider_ids is None else provider_ids,
            **kwargs
        )
    return _make
