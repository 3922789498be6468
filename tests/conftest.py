"""Shared pytest fixtures for partner ledger tests."""

import pytest

import partner_ledger.core.config as configmod
import partner_ledger.data.database as dbmod
from partner_ledger.data.database import get_db, set_db_path


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Each test gets a fresh temp DB. Resets the global singleton after."""
    db_path = tmp_path / "test.db"
    set_db_path(str(db_path))
    db = get_db()
    yield db
    db.conn.close()
    dbmod._db = None


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config.json at a temp dir so a developer's own config never leaks in."""
    path = tmp_path / "config.json"
    monkeypatch.setattr(configmod, "_config_path", lambda: path)
    configmod.reset_config_cache()
    yield path
    configmod.reset_config_cache()
