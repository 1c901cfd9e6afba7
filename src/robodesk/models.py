"""Window roles and the typed records persisted for them."""

from __future__ import annotations

import re
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field

from robodesk.geometry import Bounds

MAIN_PREFIX = "main"
LOCALE_KEY = "locale"

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_int(raw: str) -> int:
    """Parse a decimal integer, rejecting `_` separators and non-ASCII digits."""
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {raw!r}")
    return int(text)


class ExtendedState(IntEnum):
    NORMAL = 0
    ICONIFIED = 1
    MAXIMIZED = 6

    @classmethod
    def parse(cls, raw: str) -> ExtendedState:
        """Decode the integer stored under `main.state`; raises ValueError."""
        return cls(parse_int(raw))


class WindowKind(Enum):
    LOG = ("log", "log.window.title", Bounds(10, 10, 500, 500))
    GAME = ("game", "game.window.title", Bounds(520, 10, 400, 400))
    COORDINATES = ("coordinates", "coordinates.window.title", Bounds(930, 10, 200, 100))

    def __init__(self, stable_id: str, title_key: str, initial_bounds: Bounds) -> None:
        self.stable_id = stable_id
        self.title_key = title_key
        self.initial_bounds = initial_bounds

    @classmethod
    def from_stable_id(cls, stable_id: str) -> WindowKind | None:
        for kind in cls:
            if kind.stable_id == stable_id:
                return kind
        return None


class WindowRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: WindowKind
    x: int
    y: int
    width: int
    height: int
    iconified: bool = False

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)

    def to_properties(self) -> dict[str, str]:
        prefix = self.kind.stable_id
        return {
            f"{prefix}.x": str(self.x),
            f"{prefix}.y": str(self.y),
            f"{prefix}.width": str(self.width),
            f"{prefix}.height": str(self.height),
            f"{prefix}.icon": "true" if self.iconified else "false",
        }


class MainWindowRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: ExtendedState = ExtendedState.MAXIMIZED
    x: int = -1
    y: int = -1
    width: int = 0
    height: int = 0

    def to_properties(self) -> dict[str, str]:
        values = {f"{MAIN_PREFIX}.state": str(int(self.state))}
        if self.state == ExtendedState.NORMAL:
            values.update(
                {
                    f"{MAIN_PREFIX}.x": str(self.x),
                    f"{MAIN_PREFIX}.y": str(self.y),
                    f"{MAIN_PREFIX}.width": str(self.width),
                    f"{MAIN_PREFIX}.height": str(self.height),
                }
            )
        return values


class SessionConfig(BaseModel):
    main: MainWindowRecord = Field(default_factory=MainWindowRecord)
    windows: dict[str, WindowRecord] = Field(default_factory=dict)
    locale: str = ""

    def to_properties(self) -> dict[str, str]:
        values = self.main.to_properties()
        for record in self.windows.values():
            values.update(record.to_properties())
        if self.locale:
            values[LOCALE_KEY] = self.locale
        return values
