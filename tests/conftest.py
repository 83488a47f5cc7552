"""Shared fixtures for binviz tests."""

from pathlib import Path

import numpy as np
import pytest


@pytest.fixture
def write_file(tmp_path: Path):
    """Write ``data`` to ``tmp_path / name`` and return the path."""

    def _write(name: str, data: bytes) -> Path:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target

    return _write


@pytest.fixture
def random_bytes() -> bytes:
    return np.random.default_rng(1234).integers(0, 256, size=5000, dtype=np.uint8).tobytes()


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    for name in ("BINVIZ_MAX_ORDER", "BINVIZ_SCALE", "BINVIZ_WORKERS"):
        monkeypatch.delenv(name, raising=False)
