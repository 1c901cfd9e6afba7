"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config_store import ConfigStore, format_properties
from .errors import ExitCode, RobodeskError, user_facing_error
from .i18n import MESSAGES
from .logging import LOG_LEVELS, configure_logging, default_log_path, normalize_level
from .settings import AppSettings, load_settings

_VALID_LOCALES = tuple(sorted(MESSAGES))
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _log_level_type(value: str) -> str:
    normalized = normalize_level(value)
    if normalized not in LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="robodesk")
    parser.add_argument("--settings", type=Path, default=None, help="Settings TOML file")
    parser.add_argument("--session", type=Path, default=None, help="Window session file")
    parser.add_argument("--locale", choices=_VALID_LOCALES, default=None)
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Forget the saved window layout and launch GUI",
    )
    parser.add_argument(
        "--print-session",
        action="store_true",
        help="Print the saved window layout and exit",
    )
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def launch_gui(
    settings: AppSettings,
    *,
    locale: str | None = None,
    fresh_start: bool = False,
) -> int:
    from robodesk.ui.app import launch_app

    return launch_app(settings, locale=locale, fresh_start=fresh_start)


def resolve_settings(namespace: argparse.Namespace) -> AppSettings:
    try:
        settings = load_settings(namespace.settings)
        if namespace.session is not None:
            settings.session_path = str(namespace.session)
        if namespace.log_level is not None:
            settings.log_level = namespace.log_level
    except ValueError as exc:
        raise RobodeskError(
            "Invalid settings.",
            code=ExitCode.CONFIG_ERROR,
            hint=str(exc),
        ) from exc
    return settings


def print_session(settings: AppSettings) -> int:
    store = ConfigStore(settings.resolved_session_path())
    if not store.exists():
        print(f"# no session file at {store.path}")
        return int(ExitCode.SUCCESS)
    sys.stdout.write(format_properties(store.load(), comment=str(store.path)))
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    gui_launcher: Callable[[AppSettings], int | None] | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()

    try:
        settings = resolve_settings(namespace)
        logger = configure_logging(level=settings.log_level, log_file=log_path)

        if namespace.print_session:
            logger.debug("Printing session file")
            return print_session(settings)

        launcher = gui_launcher or (
            lambda resolved: launch_gui(
                resolved, locale=namespace.locale, fresh_start=namespace.fresh
            )
        )
        logger.debug("Starting GUI flow fresh=%s", namespace.fresh)
        result = launcher(settings)
        if isinstance(result, int):
            return result
        return int(ExitCode.SUCCESS)
    except RobodeskError as exc:
        logger.error(
            "Handled RobodeskError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
