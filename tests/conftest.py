"""Shared pytest fixtures for Bricks tests."""

from pathlib import Path

import pytest


@pytest.fixture
def samples_dir() -> Path:
    """Directory holding the sample .bricks programs."""
    return Path(__file__).parent


@pytest.fixture
def write_source(tmp_path: Path):
    """Write Bricks source to a temporary file and return its path."""

    def write(text: str, name: str = "input.bricks") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write
