from __future__ import annotations

from types import SimpleNamespace

from src.roomease.roomease.container import build_container
from src.roomease.roomease.database.connection import DBConfig


def test_db_config_from_settings_defaults_port():
    config = DBConfig.from_settings({"host": "db", "user": "app", "database": "roomease_db"})

    assert config.port == 3306
    assert config.password == ""


def test_build_container_does_not_share_connections_between_settings():
    settings = SimpleNamespace(FILES_BASE_URL="http://files.test")
    first = build_container(db_config={"host": "a", "user": "u", "password": "p", "database": "one"}, settings=settings)
    second = build_container(db_config={"host": "b", "user": "u", "password": "p", "database": "two"}, settings=settings)

    assert first.conn.config.database == "one"
    assert second.conn.config.database == "two"
    assert first.staff_service is not second.staff_service
