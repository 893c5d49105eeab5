from pathlib import Path

import pytest

from config import StoreConfig
from db import CatalogStore


@pytest.fixture
def config(tmp_path: Path) -> StoreConfig:
    """Store config pointing at a temporary directory, using the portable dumb engine."""
    return StoreConfig(data_dir=tmp_path / "data", backend="dbm.dumb")


@pytest.fixture
def store(config: StoreConfig) -> CatalogStore:
    """A freshly reset, open catalog store."""
    with CatalogStore(config) as s:
        s.open(reset=True)
        yield s
