#!/usr/bin/env python3
"""
Command-line interface for session-validator.

Validates canonical session JSONL files and exports the canonical message schema.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path

import typer

from session_validator.cli.logger import CLILogger
from session_validator.config.base import ValidatorSettings, settings
from session_validator.exceptions import SessionFileError
from session_validator.schemas.canonical import SCHEMA_VERSION, CanonicalMessage
from session_validator.schemas.results import SessionValidationResult, ValidationIssue
from session_validator.services.loader import LoadedSession, SessionLoaderService
from session_validator.services.session import validate_session

app = typer.Typer(
    name='session-validator',
    help='Validate canonical AI coding session transcripts',
    add_completion=False,
)


@app.command()
def validate(
    files: list[Path] = typer.Argument(..., help='Canonical session JSONL files (one session per file)'),
    json_output: bool = typer.Option(False, '--json', help='Print reports as JSON lines'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Validate canonical session files.

    Exits with status 1 when any file has errors (warnings never fail the run),
    and with status 2 when a file cannot be read.
    """
    asyncio.run(_validate_async(files, json_output, verbose, settings))


@app.command()
def schema(
    output: Path | None = typer.Argument(None, help='Output file (default: stdout)'),
) -> None:
    """Export the JSON Schema of a canonical message."""
    document = CanonicalMessage.model_json_schema()
    document['$schema'] = 'https://json-schema.org/draft/2020-12/schema'
    document['title'] = 'Canonical Session Message'
    document['description'] = 'One message of a provider-agnostic AI coding session transcript'
    document['x-schema-version'] = SCHEMA_VERSION

    text = json.dumps(document, indent=2)
    if output is None:
        typer.echo(text)
        return

    output.write_text(text + '\n', encoding='utf-8')
    typer.secho(f'✓ Exported JSON Schema to: {output}', fg=typer.colors.GREEN)
    typer.echo(f'  Schema version: {SCHEMA_VERSION}')
    typer.echo(f'  Size: {output.stat().st_size:,} bytes')


async def _validate_async(
    files: Sequence[Path], json_output: bool, verbose: bool, config: ValidatorSettings
) -> None:
    """Async implementation of validate command."""
    logger = CLILogger(verbose=verbose)
    loader = SessionLoaderService()
    policy = config.to_policy()
    failed = False

    for file_path in files:
        try:
            loaded = await loader.load_file(file_path, logger)
        except SessionFileError as e:
            typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
            raise typer.Exit(2)

        result = validate_session(loaded.messages, policy=policy)
        await logger.info(
            f'{file_path.name}: {result.validCount}/{result.messageCount} messages valid, '
            f'{len(result.errors)} errors, {len(result.warnings)} warnings'
        )

        if loaded.decode_errors or not result.valid:
            failed = True

        if json_output:
            _print_json_report(loaded, result)
        else:
            _print_text_report(loaded, result, verbose)

    if failed:
        raise typer.Exit(1)


def _print_json_report(loaded: LoadedSession, result: SessionValidationResult) -> None:
    report = {
        'file': str(loaded.path),
        'decodeErrors': [issue.model_dump(mode='json', exclude_none=True) for issue in loaded.decode_errors],
        'result': result.model_dump(mode='json', exclude_none=True),
    }
    typer.echo(json.dumps(report))


def _print_text_report(loaded: LoadedSession, result: SessionValidationResult, verbose: bool) -> None:
    valid = result.valid and not loaded.decode_errors
    if valid:
        typer.secho(f'✓ {loaded.path}', fg=typer.colors.GREEN)
    else:
        typer.secho(f'✗ {loaded.path}', fg=typer.colors.RED)

    typer.echo(f'  Session: {result.sessionId or "(unknown)"} ({result.provider or "unknown provider"})')
    typer.echo(f'  Messages: {result.validCount}/{result.messageCount} valid')
    if result.duration is not None:
        typer.echo(f'  Duration: {result.duration / 1000:.1f}s')

    for issue in loaded.decode_errors:
        _print_issue(issue, issue.line)
    for issue in result.errors:
        _print_issue(issue, _file_line(loaded, issue))

    if verbose:
        for issue in result.warnings:
            _print_issue(issue, _file_line(loaded, issue))
    elif result.warnings:
        typer.echo(f'  {len(result.warnings)} warnings (use --verbose to list)')


def _print_issue(issue: ValidationIssue, file_line: int | None) -> None:
    color = typer.colors.RED if issue.severity == 'error' else typer.colors.YELLOW
    location = f'line {file_line}' if file_line is not None else 'session'
    path = f' [{issue.path}]' if issue.path else ''
    typer.secho(f'  {issue.severity.upper()} {issue.code} ({location}){path}: {issue.message}', fg=color)


def _file_line(loaded: LoadedSession, issue: ValidationIssue) -> int | None:
    """Map an issue's message position back to its line in the file."""
    if issue.line is None or not 1 <= issue.line <= len(loaded.line_numbers):
        return None
    return loaded.line_numbers[issue.line - 1]


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
