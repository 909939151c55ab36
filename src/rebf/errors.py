from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def _hint_for(message: str, *, kind: str) -> Optional[str]:
    msg = message.lower()
    if kind == 'syntax':
        if "unmatched ']'" in msg:
            return "Remove the extra ']' or add the missing '[' before it."
        if "unclosed '['" in msg:
            return "Every '[' needs a matching ']' later in the program."
        return None
    if kind == 'io':
        if 'broken pipe' in msg:
            return 'The process reading the output exited before the program finished.'
        if 'not readable' in msg or 'not writable' in msg:
            return 'Check that the channel was opened in binary mode for ",", "." and text mode for "#".'
        if 'closed file' in msg:
            return 'The channel was closed before the program finished running.'
        return None
    return None


@dataclass
class RebfError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class RebfSyntaxError(RebfError):
    delimiter: str


@dataclass
class RebfIOError(RebfError):
    operation: str


@dataclass
class RebfInputExhausted(RebfError):
    pass


def make_syntax_error(*, message: str, delimiter: str) -> RebfSyntaxError:
    hint = _hint_for(message, kind='syntax')
    hint_block = f"\nHint: {hint}" if hint else ""
    return RebfSyntaxError(
        message=f"SyntaxError: {message}{hint_block}",
        delimiter=delimiter,
    )


def make_io_error(*, operation: str, error: Exception) -> RebfIOError:
    # ValueError (closed channel) has no strerror.
    detail = getattr(error, 'strerror', None) or str(error) or type(error).__name__
    hint = _hint_for(detail, kind='io')
    hint_block = f"\nHint: {hint}" if hint else ""
    return RebfIOError(
        message=f"IOError: '{operation}' failed: {detail}{hint_block}",
        operation=operation,
    )
