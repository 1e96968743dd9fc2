"""Test fixtures for jmu-sankey.

Provides fixtures for:
- The sample budget dataset (raw dict and Dataset)
- Test configurations and site paths under tmp_path
"""

import json
from pathlib import Path
from typing import Any

import pytest

from jmu_sankey.config import Config
from jmu_sankey.dataset import Dataset
from jmu_sankey.storage.paths import SitePaths

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def dataset_path() -> Path:
    """Path to the sample budget dataset."""
    return FIXTURES_DIR / "jmu.json"


@pytest.fixture
def dataset_dict(dataset_path: Path) -> dict[str, Any]:
    """Sample budget dataset as parsed JSON."""
    with dataset_path.open() as f:
        data: dict[str, Any] = json.load(f)
    return data


@pytest.fixture
def dataset(dataset_dict: dict[str, Any]) -> Dataset:
    """Sample budget dataset wrapped for graph building."""
    return Dataset(dataset_dict)


@pytest.fixture
def config(tmp_path: Path, dataset_path: Path) -> Config:
    """Config reading the sample dataset and writing under tmp_path."""
    return Config.model_validate(
        {
            "dataset": {"source": str(dataset_path)},
            "report": {"output_dir": str(tmp_path / "site")},
        }
    )


@pytest.fixture
def paths(config: Config) -> SitePaths:
    """Site path manager for the test config."""
    return SitePaths(config)
