"""Narrow window interfaces consumed by the session subsystem."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Iterator
from typing import Protocol

from robodesk.errors import DuplicateWindowError
from robodesk.geometry import Bounds, Size
from robodesk.i18n import Localizer
from robodesk.models import ExtendedState, WindowKind

logger = py_logging.getLogger(__name__)

StateListener = Callable[[ExtendedState, ExtendedState], None]


class SelectionRejected(Exception):
    """The host refused to focus a window."""


class MainWindow(Protocol):
    def extended_state(self) -> ExtendedState: ...

    def set_extended_state(self, state: ExtendedState) -> None: ...

    def bounds(self) -> Bounds: ...

    def set_bounds(self, bounds: Bounds) -> None: ...

    def set_minimum_size(self, size: Size) -> None: ...

    def add_state_listener(self, listener: StateListener) -> None: ...

    def is_displayable(self) -> bool: ...

    def dispose(self) -> None: ...


class SubWindow(Protocol):
    kind: WindowKind

    def bounds(self) -> Bounds: ...

    def set_bounds(self, bounds: Bounds) -> None: ...

    def is_iconified(self) -> bool: ...

    def set_iconified(self, iconified: bool) -> None: ...

    def select(self) -> None: ...

    def is_displayable(self) -> bool: ...

    def dispose(self) -> None: ...


class Display(Protocol):
    def screen_size(self) -> Size: ...


class DomainModel(Protocol):
    def shutdown(self) -> None: ...


def shutdown_hook(window: object) -> Callable[[], None] | None:
    hook = getattr(window, "shutdown", None)
    return hook if callable(hook) else None


class WindowRegistry:
    """Open sub-windows in creation order, one per window kind."""

    def __init__(self, localizer: Localizer) -> None:
        self._localizer = localizer
        self._windows: dict[WindowKind, SubWindow] = {}

    def __iter__(self) -> Iterator[SubWindow]:
        return iter(list(self._windows.values()))

    def __len__(self) -> int:
        return len(self._windows)

    def get(self, kind: WindowKind) -> SubWindow | None:
        return self._windows.get(kind)

    def open_windows(self) -> list[SubWindow]:
        return [window for window in self._windows.values() if window.is_displayable()]

    def add(self, window: SubWindow, *, bounds: Bounds | None = None) -> SubWindow:
        if window.kind in self._windows:
            raise DuplicateWindowError(window.kind.stable_id)
        window.set_bounds(bounds or window.kind.initial_bounds)
        self._windows[window.kind] = window
        try:
            window.select()
        except SelectionRejected as exc:
            logger.error("%s: %s", self._localizer.get_string("window.selection.error"), exc)
        return window

    def initialize(self, factory: Callable[[WindowKind], SubWindow]) -> list[SubWindow]:
        self.clear()
        return [self.add(factory(kind)) for kind in WindowKind]

    def clear(self) -> None:
        self._windows.clear()
