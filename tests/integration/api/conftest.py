from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blockdoc.api.deps import Settings, get_rules, get_settings
from blockdoc.api.main import app
from blockdoc.rules.models import Rules


@pytest.fixture
def api_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("BLOCKDOC_DATA_DIR", str(tmp_path / "data"))
    return Settings()


@pytest.fixture
def client(api_settings: Settings) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: api_settings
    app.dependency_overrides[get_rules] = lambda: Rules()
    yield TestClient(app)
    app.dependency_overrides.clear()
