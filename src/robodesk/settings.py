"""Application settings loaded from TOML."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from robodesk.geometry import Size
from robodesk.i18n import DEFAULT_LOCALE, MESSAGES
from robodesk.logging import LOG_LEVELS, normalize_level

DEFAULT_SETTINGS_PATH = Path("~/.config/robodesk/settings.toml").expanduser()
DEFAULT_SESSION_PATH = "~/robots_config.properties"
DEFAULT_NORMAL_WIDTH = 950
DEFAULT_NORMAL_HEIGHT = 850
MIN_NORMAL_DIMENSION = 200
SESSION_PATH_ENV = "ROBODESK_SESSION_PATH"


class AppSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    session_path: str = DEFAULT_SESSION_PATH
    normal_width: int = Field(default=DEFAULT_NORMAL_WIDTH, ge=MIN_NORMAL_DIMENSION)
    normal_height: int = Field(default=DEFAULT_NORMAL_HEIGHT, ge=MIN_NORMAL_DIMENSION)
    default_locale: str = DEFAULT_LOCALE
    log_level: str = "INFO"

    @field_validator("default_locale")
    @classmethod
    def _validate_locale(cls, value: str) -> str:
        if value not in MESSAGES:
            raise ValueError(f"Invalid locale: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = normalize_level(value)
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized

    @property
    def normal_size(self) -> Size:
        return Size(self.normal_width, self.normal_height)

    def resolved_session_path(self) -> Path:
        return Path(self.session_path).expanduser()


def get_settings_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_SETTINGS_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _sanitize(raw: dict[str, object]) -> AppSettings:
    settings = AppSettings()

    session_path = raw.get("session_path", settings.session_path)
    if isinstance(session_path, str) and session_path.strip():
        settings.session_path = session_path.strip()

    for name in ("normal_width", "normal_height"):
        value = raw.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value >= MIN_NORMAL_DIMENSION:
            setattr(settings, name, value)

    default_locale = raw.get("default_locale", settings.default_locale)
    if isinstance(default_locale, str) and default_locale.strip().lower() in MESSAGES:
        settings.default_locale = default_locale.strip().lower()

    log_level = raw.get("log_level", settings.log_level)
    if isinstance(log_level, str) and normalize_level(log_level) in LOG_LEVELS:
        settings.log_level = log_level

    return settings


def _apply_env(settings: AppSettings) -> AppSettings:
    env_session = os.getenv(SESSION_PATH_ENV, "").strip()
    if env_session:
        settings.session_path = env_session
    return settings


def load_settings(path: str | Path | None = None) -> AppSettings:
    resolved = get_settings_path(path)
    if not resolved.exists():
        return _apply_env(AppSettings())
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _apply_env(AppSettings())
    if not isinstance(raw, dict):
        return _apply_env(AppSettings())
    return _apply_env(_sanitize(raw))


def save_settings(settings: AppSettings, path: str | Path | None = None) -> Path:
    resolved = get_settings_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        f"session_path = {_toml_scalar(settings.session_path)}",
        f"normal_width = {_toml_scalar(settings.normal_width)}",
        f"normal_height = {_toml_scalar(settings.normal_height)}",
        f"default_locale = {_toml_scalar(settings.default_locale)}",
        f"log_level = {_toml_scalar(settings.log_level)}",
    ]
    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
