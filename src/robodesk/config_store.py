"""Flat key/value persistence over a `.properties` style text file."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path

logger = py_logging.getLogger(__name__)

_COMMENT_PREFIXES = ("#", "!")
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_DECODE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ENCODE_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def _logical_lines(raw_lines: Iterable[str]) -> list[str]:
    """Join physical lines ending in an odd number of backslashes."""
    lines: list[str] = []
    pending = ""
    for raw in raw_lines:
        line = raw.rstrip("\r\n")
        if pending:
            line = line.lstrip(_WHITESPACE)
        elif not line.strip() or line.lstrip(_WHITESPACE).startswith(_COMMENT_PREFIXES):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        lines.append(pending + line)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _unescape(text: str) -> str:
    result: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\" or index + 1 >= len(text):
            result.append(char)
            index += 1
            continue
        marker = text[index + 1]
        if marker == "u" and index + 6 <= len(text):
            try:
                result.append(chr(int(text[index + 2 : index + 6], 16)))
            except ValueError:
                result.append(marker)
                index += 2
                continue
            index += 6
            continue
        result.append(_DECODE_ESCAPES.get(marker, marker))
        index += 2
    return "".join(result)


def _split_entry(line: str) -> tuple[str, str]:
    text = line.lstrip(_WHITESPACE)
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1
    key = text[:index]
    rest = text[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def _escape(text: str, *, is_key: bool) -> str:
    result: list[str] = []
    for position, char in enumerate(text):
        if char in _ENCODE_ESCAPES:
            result.append(_ENCODE_ESCAPES[char])
        elif char in "=:#!":
            result.append("\\" + char)
        elif char == " " and (is_key or position == 0):
            result.append("\\ ")
        else:
            result.append(char)
    return "".join(result)


def parse_properties(text: str) -> dict[str, str]:
    entries: dict[str, str] = {}
    for line in _logical_lines(text.splitlines()):
        key, value = _split_entry(line)
        entries[key] = value
    return entries


def format_properties(
    mapping: Mapping[str, str],
    *,
    comment: str = "",
    timestamp: datetime | None = None,
) -> str:
    lines: list[str] = []
    for comment_line in comment.splitlines():
        lines.append(f"#{comment_line}")
    if timestamp is not None:
        lines.append(f"#{timestamp.strftime('%a %b %d %H:%M:%S %Y')}")
    for key in sorted(mapping):
        lines.append(f"{_escape(key, is_key=True)}={_escape(str(mapping[key]), is_key=False)}")
    return "\n".join(lines) + "\n"


class ConfigStore:
    """Reads and writes the whole key/value mapping in one go.

    Failures are logged and never raised: an unreadable file behaves like an
    empty one and an unwritable file leaves its previous content in place.
    """

    def __init__(self, path: str | Path, *, comment_timestamp: bool = True) -> None:
        self._path = Path(path).expanduser()
        self._comment_timestamp = comment_timestamp

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> dict[str, str]:
        if not self.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Config load failed path=%s error=%s", self._path, exc)
            return {}
        return parse_properties(text)

    def save(self, mapping: Mapping[str, str], comment: str = "") -> bool:
        payload = format_properties(
            mapping,
            comment=comment,
            timestamp=datetime.now() if self._comment_timestamp else None,
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.error("Config save failed path=%s error=%s", self._path, exc)
            return False
        logger.debug("Config saved path=%s keys=%s", self._path, len(mapping))
        return True

    def update(self, changes: Mapping[str, str], comment: str = "") -> bool:
        merged = self.load()
        merged.update(changes)
        return self.save(merged, comment)

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Config delete failed path=%s error=%s", self._path, exc)
            return False
        logger.debug("Config deleted path=%s", self._path)
        return True
