"""Exception hierarchy for the ember-less scaffolder."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every failure raised by the scaffolder."""


class InputValidationError(ScaffoldError):
    """Raised when a collected answer is malformed or out of range.

    Always raised before any file operation takes place.
    """

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class ScaffoldIOError(ScaffoldError):
    """Raised when a template is missing or a destination cannot be written."""

    def __init__(self, action: str, path: str, reason: str) -> None:
        self.action = action
        self.path = path
        self.reason = reason
        super().__init__(f"{action} failed for {path}: {reason}")
