"""Shared pytest fixtures for all tests."""

import io
import json

import pytest

from folderstore.config import AgentConfig
from folderstore.protocol import ResponseWriter

OID = "abcd1234ef567890abcd1234ef567890abcd1234ef567890abcd1234ef567890"


@pytest.fixture
def store_dir(tmp_path):
    """
    Create an empty folder store.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the store base directory
    """
    path = tmp_path / 'store'
    path.mkdir()
    return path


@pytest.fixture
def git_dir(tmp_path):
    """
    Create a fake repository metadata directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the .git directory
    """
    path = tmp_path / 'repo' / '.git'
    path.mkdir(parents=True)
    return path


@pytest.fixture
def config(store_dir, git_dir):
    """Agent configuration pointing at the temporary store and git dir."""
    return AgentConfig(base_dir=str(store_dir), git_dir=git_dir)


@pytest.fixture
def output():
    """In-memory protocol output stream."""
    return io.StringIO()


@pytest.fixture
def writer(output):
    """Response writer bound to the in-memory output."""
    return ResponseWriter(output)


@pytest.fixture
def make_source(tmp_path):
    """
    Factory creating a working-tree file of a given size.

    Returns:
        Callable(size, name='source.bin') -> Path
    """
    def _make(size, name='source.bin'):
        path = tmp_path / 'work' / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(bytes(i % 251 for i in range(size)))
        return path
    return _make


def read_messages(output):
    """Decode every JSON line written to an in-memory output stream."""
    return [json.loads(line) for line in output.getvalue().splitlines()]
