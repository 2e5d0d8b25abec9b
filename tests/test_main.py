"""Tests for the agent entry point."""

import io
import json
import logging
from unittest.mock import patch

import pytest

from common.constants import AGENT_VERSION, BASEDIR_ENV
from folderstore import main as main_module
from folderstore.exceptions import GitDirError


@pytest.fixture
def quiet_logging():
    """Keep main() from installing handlers on the shared component logger."""
    with patch.object(main_module, 'setup_logging', return_value=logging.getLogger('test_main')) as setup:
        yield setup


def test_parser_accepts_base_dir():
    args = main_module.build_parser().parse_args(['/srv/lfs'])

    assert args.basedir == '/srv/lfs'
    assert args.debug is False


def test_parser_base_dir_optional():
    args = main_module.build_parser().parse_args([])

    assert args.basedir is None


def test_version_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as exc:
        main_module.build_parser().parse_args(['--version'])

    assert exc.value.code == 0
    assert AGENT_VERSION in capsys.readouterr().out


def test_git_dir_failure_aborts(quiet_logging, monkeypatch):
    stdout = io.StringIO()
    monkeypatch.setattr('sys.stdin', io.StringIO('{"event": "init"}\n'))
    monkeypatch.setattr('sys.stdout', stdout)

    with patch.object(main_module, 'resolve_git_dir', side_effect=GitDirError('no repo')), \
            patch.object(main_module, 'serve') as serve:
        status = main_module.main(['/srv/lfs'])

    assert status == 1
    serve.assert_not_called()
    assert stdout.getvalue() == ''


def test_main_serves_stdin(quiet_logging, monkeypatch, tmp_path):
    stdout = io.StringIO()
    monkeypatch.delenv(BASEDIR_ENV, raising=False)
    monkeypatch.setattr('sys.stdin', io.StringIO('{"event": "init", "operation": "upload"}\n{"event": "terminate"}\n'))
    monkeypatch.setattr('sys.stdout', stdout)

    with patch.object(main_module, 'resolve_git_dir', return_value=tmp_path):
        status = main_module.main([str(tmp_path / 'store')])

    assert status == 0
    assert [json.loads(line) for line in stdout.getvalue().splitlines()] == [{}]


def test_main_without_base_dir_reports_on_init(quiet_logging, monkeypatch, tmp_path):
    stdout = io.StringIO()
    monkeypatch.delenv(BASEDIR_ENV, raising=False)
    monkeypatch.setattr('sys.stdin', io.StringIO('{"event": "init", "operation": "download"}\n'))
    monkeypatch.setattr('sys.stdout', stdout)

    with patch.object(main_module, 'resolve_git_dir', return_value=tmp_path):
        status = main_module.main([])

    assert status == 0
    assert json.loads(stdout.getvalue())['error']['code'] == 9


def test_invalid_utf8_line_is_skipped(quiet_logging, monkeypatch, tmp_path):
    stdout = io.StringIO()
    stdin = io.TextIOWrapper(io.BytesIO(
        b'{"event": "\xff"}\n'
        b'\xfe\xfd not even json\n'
        b'{"event": "init", "operation": "upload"}\n'
    ))
    monkeypatch.setattr('sys.stdin', stdin)
    monkeypatch.setattr('sys.stdout', stdout)

    with patch.object(main_module, 'resolve_git_dir', return_value=tmp_path):
        status = main_module.main([str(tmp_path / 'store')])

    assert status == 0
    assert [json.loads(line) for line in stdout.getvalue().splitlines()] == [{}]


def test_debug_flag_sets_level(quiet_logging, monkeypatch, tmp_path):
    monkeypatch.setattr('sys.stdin', io.StringIO(''))
    monkeypatch.setattr('sys.stdout', io.StringIO())

    with patch.object(main_module, 'resolve_git_dir', return_value=tmp_path):
        main_module.main(['--debug', '/srv/lfs'])

    quiet_logging.assert_called_once_with('folderstore', log_level='DEBUG')
