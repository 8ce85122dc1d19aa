from __future__ import annotations

from pathlib import Path

import pytest

import ojtech_resume.data.db as app_db
from ojtech_resume.data.db import init_db


@pytest.fixture
def api_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Use a temporary SQLite DB. Modules opt in with ``pytestmark``."""
    db_path = tmp_path / "api.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db._engine = None
    app_db._SessionLocal = None
    init_db()
    yield
    # Dispose engine to release connections
    if app_db._engine is not None:
        app_db._engine.dispose()
        app_db._engine = None
        app_db._SessionLocal = None

