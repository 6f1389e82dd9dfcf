"""Shared fixtures for Impact Mapper tests."""
from pathlib import Path
from typing import Callable, Dict

import pytest


FIXTURES_DIR = Path(__file__).parent / 'fixtures'


@pytest.fixture
def sample_project() -> Path:
    """Small JS project: utils.js is imported by services.js (ESM) and api.js (CommonJS)."""
    return (FIXTURES_DIR / 'sample_project').resolve()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write {relative path: source} into a temporary project root and return the root."""

    def _make(files: Dict[str, str]) -> Path:
        for rel_path, source in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(source, encoding='utf-8')
        return tmp_path.resolve()

    return _make
