"""Shared fixtures for jar_discovery tests."""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from jar_discovery.models.archive import ArchiveSnapshot

DEFAULT_LOCATION = "/opt/app/orders-service-1.0.0.jar"


@pytest.fixture
def make_snapshot() -> Callable[..., ArchiveSnapshot]:
    """Return a factory for snapshots with sensible identity defaults."""

    def _make(**overrides: Any) -> ArchiveSnapshot:
        fields: dict[str, Any] = {
            "checksum": "0" * 64,
            "location": DEFAULT_LOCATION,
            "last_modified": datetime(2024, 1, 1, tzinfo=UTC),
            "size": 1024,
        }
        fields.update(overrides)
        return ArchiveSnapshot(**fields)

    return _make


@pytest.fixture
def build_jar(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that writes a zip archive with the given entries."""

    def _build(entries: dict[str, str | bytes], name: str = "app.jar") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry, content in entries.items():
                zf.writestr(entry, content)
        return path

    return _build
