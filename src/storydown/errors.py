from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    MANIFEST_FETCH_FAILED = "MANIFEST_FETCH_FAILED"
    MANIFEST_INVALID = "MANIFEST_INVALID"
    MANIFEST_EMPTY = "MANIFEST_EMPTY"
    PAGE_LOAD_FAILED = "PAGE_LOAD_FAILED"
    BROWSER_LAUNCH_FAILED = "BROWSER_LAUNCH_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


class StorydownError(Exception):
    """Raised by collaborators for all expected failure conditions.

    Recoverable errors (a single docs page failing to load) are caught by the
    exporter loop and the story is emitted heading-only. Anything else
    propagates to the CLI, which reports it and exits non-zero.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

