"""Error model and exit code contract."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    VALIDATION_ERROR = 7
    UI_UNAVAILABLE = 8


@dataclass
class RobodeskError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


class UnsupportedLocaleError(RobodeskError):
    def __init__(self, locale: str, available: Iterable[str]) -> None:
        super().__init__(
            f"Unsupported locale: {locale}",
            code=ExitCode.VALIDATION_ERROR,
            hint=f"Use one of: {', '.join(available)}.",
        )
        self.locale = locale


class DuplicateWindowError(RobodeskError):
    def __init__(self, stable_id: str) -> None:
        super().__init__(
            f"Window already registered: {stable_id}",
            code=ExitCode.VALIDATION_ERROR,
        )
        self.stable_id = stable_id


class UiUnavailableError(RobodeskError):
    """PySide6 could not be imported."""

    def __init__(self, reason: str = "") -> None:
        message = "PySide6 is not installed; the desktop shell cannot start."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            code=ExitCode.UI_UNAVAILABLE,
            hint="Run `pip install PySide6` or use --print-session.",
        )


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
