"""
Tests for the session-validator command-line interface.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from helpers import build_message, tool_result
from typer.testing import CliRunner

from session_validator.cli import main
from session_validator.cli.main import app
from session_validator.config import ValidatorSettings, get_settings
from session_validator.schemas.canonical import SCHEMA_VERSION

runner = CliRunner()

# CLI runs validate against the current time
TIMESTAMP = '2026-01-20T10:00:00.000Z'


def write_session(path: Path, *lines: object) -> Path:
    path.write_text(
        '\n'.join(line if isinstance(line, str) else json.dumps(line) for line in lines) + '\n',
        encoding='utf-8',
    )
    return path


def test_valid_file(tmp_path: Path) -> None:
    path = write_session(
        tmp_path / 'good.jsonl',
        build_message('m1', timestamp=TIMESTAMP),
        build_message('m2', type='assistant', content='Hi', timestamp='2026-01-20T10:00:01.000Z'),
    )

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 0, result.output
    assert f'✓ {path}' in result.stdout
    assert 'Messages: 2/2 valid' in result.stdout
    assert 'Duration: 1.0s' in result.stdout


def test_invalid_file_exits_1(tmp_path: Path) -> None:
    path = write_session(
        tmp_path / 'bad.jsonl',
        build_message('m1', content=[tool_result('ghost')], timestamp=TIMESTAMP),
    )

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 1
    assert f'✗ {path}' in result.stdout
    assert 'ORPHAN_TOOL_RESULT (line 1)' in result.stdout


def test_warnings_do_not_fail(tmp_path: Path) -> None:
    path = write_session(
        tmp_path / 'gap.jsonl',
        build_message('m1', timestamp='2026-01-20T08:00:00Z'),
        build_message('m2', timestamp='2026-01-20T10:00:00Z'),
    )

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 0
    assert '1 warnings (use --verbose to list)' in result.stdout


def test_verbose_lists_warnings(tmp_path: Path) -> None:
    path = write_session(
        tmp_path / 'gap.jsonl',
        build_message('m1', timestamp='2026-01-20T08:00:00Z'),
        build_message('m2', timestamp='2026-01-20T10:00:00Z'),
    )

    result = runner.invoke(app, ['validate', '--verbose', str(path)])

    assert result.exit_code == 0
    assert 'WARNING LARGE_TIME_GAP (line 2)' in result.stdout


def test_issue_lines_follow_file_lines(tmp_path: Path) -> None:
    path = write_session(
        tmp_path / 'blank.jsonl',
        build_message('m1', timestamp=TIMESTAMP),
        '',
        build_message('m2', type='user', role='assistant', content=[tool_result('m1')], timestamp=TIMESTAMP),
    )

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 1
    assert 'INVALID_TOOL_RESULT_ROLE (line 3)' in result.stdout


def test_decode_error_fails_file(tmp_path: Path) -> None:
    path = write_session(tmp_path / 'broken.jsonl', build_message('m1', timestamp=TIMESTAMP), '{"uuid": ')

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 1
    assert 'JSONL_DECODE_ERROR (line 2)' in result.stdout


def test_json_report(tmp_path: Path) -> None:
    good = write_session(tmp_path / 'good.jsonl', build_message('m1', timestamp=TIMESTAMP))
    bad = write_session(
        tmp_path / 'bad.jsonl',
        build_message('dup', timestamp=TIMESTAMP),
        build_message('dup', timestamp=TIMESTAMP),
    )

    result = runner.invoke(app, ['validate', '--json', str(good), str(bad)])

    assert result.exit_code == 1
    reports = [json.loads(line) for line in result.stdout.splitlines()]
    assert [report['file'] for report in reports] == [str(good), str(bad)]
    assert reports[0]['result']['valid'] is True
    assert reports[0]['decodeErrors'] == []
    assert reports[1]['result']['valid'] is False
    assert reports[1]['result']['errors'][0]['code'] == 'DUPLICATE_UUID'
    assert reports[1]['result']['errors'][0]['details']['messageIndices'] == [0, 1]


def test_missing_file_exits_2(tmp_path: Path) -> None:
    result = runner.invoke(app, ['validate', str(tmp_path / 'nope.jsonl')])

    assert result.exit_code == 2
    assert 'Error: Cannot read session file' in result.output


def test_threshold_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('LARGE_TIME_GAP_MINUTES', '180')
    monkeypatch.setattr(main, 'settings', get_settings(ValidatorSettings))
    path = write_session(
        tmp_path / 'gap.jsonl',
        build_message('m1', timestamp='2026-01-20T08:00:00Z'),
        build_message('m2', timestamp='2026-01-20T10:00:00Z'),
    )

    result = runner.invoke(app, ['validate', str(path)])

    assert result.exit_code == 0
    assert 'warnings' not in result.stdout


def test_schema_to_stdout() -> None:
    result = runner.invoke(app, ['schema'])

    assert result.exit_code == 0
    document = json.loads(result.stdout)
    assert document['x-schema-version'] == SCHEMA_VERSION
    assert document['title'] == 'Canonical Session Message'
    assert set(document['required']) >= {'uuid', 'timestamp', 'type', 'sessionId', 'provider', 'message'}


def test_schema_to_file(tmp_path: Path) -> None:
    output = tmp_path / 'canonical.schema.json'

    result = runner.invoke(app, ['schema', str(output)])

    assert result.exit_code == 0
    assert 'Exported JSON Schema' in result.stdout
    assert json.loads(output.read_text(encoding='utf-8'))['x-schema-version'] == SCHEMA_VERSION
