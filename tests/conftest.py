"""Shared pytest fixtures."""

from __future__ import annotations

import itertools

import pytest

from inkwell.db.connection import Database


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    conn = Database(tmp_path / ".inkwell.db").connect()
    yield conn
    conn.close()


@pytest.fixture
def id_factory():
    """Deterministic id source: gen0001, gen0002, …"""
    counter = itertools.count(1)
    return lambda: f"gen{next(counter):04d}"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep the user's ~/.inkwell/config.yaml and INKWELL_* env vars out of tests."""
    monkeypatch.setattr("inkwell.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global" / "config.yaml")
    for var in ("INKWELL_GENERATION_MODEL", "INKWELL_PATCH_MODEL", "INKWELL_IDENTITY_ATTRIBUTE"):
        monkeypatch.delenv(var, raising=False)
