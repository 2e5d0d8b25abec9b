"""Tests for folder store addressing."""

from pathlib import Path

import pytest

from folderstore.exceptions import InvalidOidError
from folderstore.storage import (
    download_staging_dir,
    download_temp_path,
    storage_path,
    upload_temp_path,
)
from conftest import OID


def test_storage_path_splits_by_prefix(tmp_path):
    path = storage_path(tmp_path, OID)

    assert path == tmp_path / 'ab' / 'cd' / OID


def test_storage_path_accepts_string_base():
    path = storage_path('/srv/lfs', 'ffee0011')

    assert path == Path('/srv/lfs/ff/ee/ffee0011')


def test_storage_path_is_deterministic(tmp_path):
    assert storage_path(tmp_path, OID) == storage_path(tmp_path, OID)


def test_storage_path_distinct_oids_get_distinct_paths(tmp_path):
    first = storage_path(tmp_path, 'abcd0001')
    second = storage_path(tmp_path, 'abcd0002')
    other_prefix = storage_path(tmp_path, 'abce0001')

    assert first.parent == second.parent
    assert first != second
    assert other_prefix.parent != first.parent


def test_storage_path_minimum_length(tmp_path):
    assert storage_path(tmp_path, 'abcd') == tmp_path / 'ab' / 'cd' / 'abcd'


@pytest.mark.parametrize('oid', ['', 'a', 'abc'])
def test_storage_path_rejects_short_oid(tmp_path, oid):
    with pytest.raises(InvalidOidError):
        storage_path(tmp_path, oid)


def test_download_temp_path_under_lfs_tmp(tmp_path):
    git_dir = tmp_path / '.git'

    assert download_staging_dir(git_dir) == git_dir / 'lfs' / 'tmp'
    assert download_temp_path(git_dir, OID) == git_dir / 'lfs' / 'tmp' / f'{OID}.tmp'


def test_download_temp_path_does_not_create_folders(tmp_path):
    download_temp_path(tmp_path / '.git', OID)

    assert not (tmp_path / '.git').exists()


def test_upload_temp_path_is_sibling(tmp_path):
    dest = storage_path(tmp_path, OID)

    temp = upload_temp_path(dest)

    assert temp.parent == dest.parent
    assert temp.name == f'{OID}.tmp'
