"""
Shared pytest fixtures and configuration for courtsdb tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **sample_registry**: The registry built from the bundled data (session)
- **write_data_dir**: Writes courts/variables/places files into a directory
- **make_court**: Builds CourtRecord objects with sensible defaults
- **clean_env**: Removes COURTSDB_* environment variables for a test
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest

from courtsdb.registry.loader import load_registry
from courtsdb.registry.models import CourtRecord
from courtsdb.registry.registry import Registry


# ============================================================================
# Path and Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_data_dir() -> Callable[..., Path]:
    """Write a registry data directory and return its path.

    Example:
        def test_load(temp_dir, write_data_dir):
            data_dir = write_data_dir(
                temp_dir,
                courts=[{"id": "x", "name": "X Court"}],
                variables={"ct": "court"},
                places={"states": ["Ohio", "Iowa"]},
            )
    """

    def _write(
        directory: Path,
        courts: List[Dict[str, Any]],
        variables: Optional[Dict[str, str]] = None,
        places: Optional[Dict[str, List[str]]] = None,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "courts.json").write_text(json.dumps(courts), encoding="utf-8")
        if variables is not None:
            (directory / "variables.json").write_text(
                json.dumps(variables), encoding="utf-8"
            )
        if places:
            places_dir = directory / "places"
            places_dir.mkdir(exist_ok=True)
            for name, entries in places.items():
                (places_dir / f"{name}.txt").write_text(
                    "\n".join(entries) + "\n", encoding="utf-8"
                )
        return directory

    return _write


# ============================================================================
# Registry Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def sample_registry() -> Registry:
    """The registry built from the data bundled with the package."""
    return load_registry()


@pytest.fixture
def make_court() -> Callable[..., CourtRecord]:
    """Build a CourtRecord from keyword arguments using source keys."""

    def _make(court_id: str, name: Optional[str] = None, **fields: Any) -> CourtRecord:
        data: Dict[str, Any] = {"id": court_id, "name": name or f"{court_id} court"}
        data.update(fields)
        return CourtRecord.model_validate(data)

    return _make


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every COURTSDB_* variable from the environment."""
    for key in list(os.environ):
        if key.startswith("COURTSDB_"):
            monkeypatch.delenv(key, raising=False)
