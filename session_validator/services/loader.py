"""
Session loader service - reads canonical JSONL files.

Turns a file into the ordered value list the session validator expects. Lines
that are not valid JSON become issues instead of aborting the load: the rest of
the session can still be checked.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import orjson

from session_validator.exceptions import SessionFileError
from session_validator.protocols import LoggerProtocol
from session_validator.rules import IssueCode
from session_validator.schemas.results import ValidationIssue
from session_validator.schemas.types import BaseStrictModel


class LoadedSession(BaseStrictModel):
    """Decoded contents of one session file.

    Fields:
        path: Source file
        messages: Decoded values in file order (blank and undecodable lines excluded)
        line_numbers: File line number of each entry in messages
        decode_errors: One JSONL_DECODE_ERROR issue per undecodable line
    """

    path: Path
    messages: Sequence[object]
    line_numbers: Sequence[int]
    decode_errors: Sequence[ValidationIssue]


class SessionLoaderService:
    """
    Service for loading canonical session JSONL files.

    Pure I/O - validation is left to validate_session.
    """

    async def load_file(self, file_path: Path, logger: LoggerProtocol) -> LoadedSession:
        """
        Load and decode a session JSONL file.

        Args:
            file_path: Path to JSONL file
            logger: Logger instance

        Returns:
            LoadedSession with decoded values and decode errors

        Raises:
            SessionFileError: If the file cannot be opened or read
        """
        await logger.info(f'Loading {file_path.name}')

        messages: list[object] = []
        line_numbers: list[int] = []
        decode_errors: list[ValidationIssue] = []

        try:
            with open(file_path, 'rb') as f:
                for line_num, line in enumerate(f, 1):
                    if not line.strip():
                        continue

                    try:
                        messages.append(orjson.loads(line))
                    except orjson.JSONDecodeError as e:
                        await logger.warning(f'{file_path.name}:{line_num}: invalid JSON ({e})')
                        decode_errors.append(
                            ValidationIssue(
                                severity='error',
                                code=IssueCode.JSONL_DECODE_ERROR,
                                message=f'Line is not valid JSON: {e}',
                                line=line_num,
                                details={'file': str(file_path)},
                            )
                        )
                        continue

                    line_numbers.append(line_num)
        except OSError as e:
            raise SessionFileError(file_path, e.strerror or str(e)) from e

        await logger.info(f'Loaded {len(messages)} messages from {file_path.name}')

        return LoadedSession(
            path=file_path,
            messages=messages,
            line_numbers=line_numbers,
            decode_errors=decode_errors,
        )
