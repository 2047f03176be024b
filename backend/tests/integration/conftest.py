"""Fixtures for tests that run against real store files in a temp directory."""

from __future__ import annotations

import pytest

from tests.helpers.stores import write_snapshot


@pytest.fixture(autouse=True)
def _factories_session():
    """File-backed tests open their own stores; no factory session to wire."""
    yield


@pytest.fixture()
def workdir(tmp_path, monkeypatch):
    """Run from an empty directory with the testing config selected."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "testing")
    return tmp_path


@pytest.fixture()
def template(workdir):
    """An empty file: SQLite opens it as an empty database."""
    path = workdir / "template.db"
    path.touch()
    return path


@pytest.fixture()
def snapshot(workdir):
    return write_snapshot(
        workdir / "dry.db",
        slots=[(1, 5, 2), (2, 3, None)],
        users=[("alice", 9), ("bob", None)],
    )
