from __future__ import annotations

import logging as py_logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from robodesk.config_store import ConfigStore
from robodesk.geometry import Bounds, Size
from robodesk.i18n import Localizer
from robodesk.models import ExtendedState, WindowKind
from robodesk.window_state import WindowStateManager
from robodesk.windows import SelectionRejected, StateListener, WindowRegistry

FULL_HD = Size(1920, 1080)


class FakeMainWindow:
    def __init__(
        self,
        state: ExtendedState = ExtendedState.NORMAL,
        bounds: Bounds = Bounds(0, 0, 640, 480),
    ) -> None:
        self.state = state
        self.current = bounds
        self.minimum: Size | None = None
        self.listeners: list[StateListener] = []
        self.displayable = True
        self.disposed = 0

    def extended_state(self) -> ExtendedState:
        return self.state

    def set_extended_state(self, state: ExtendedState) -> None:
        old = self.state
        self.state = state
        if old != state:
            for listener in list(self.listeners):
                listener(old, state)

    def bounds(self) -> Bounds:
        return self.current

    def set_bounds(self, bounds: Bounds) -> None:
        self.current = bounds

    def set_minimum_size(self, size: Size) -> None:
        self.minimum = size

    def add_state_listener(self, listener: StateListener) -> None:
        self.listeners.append(listener)

    def is_displayable(self) -> bool:
        return self.displayable

    def dispose(self) -> None:
        self.disposed += 1
        self.displayable = False


class FakeSubWindow:
    def __init__(self, kind: WindowKind, *, reject_selection: bool = False) -> None:
        self.kind = kind
        self.current = Bounds(0, 0, 10, 10)
        self.iconified = False
        self.displayable = True
        self.selected = False
        self.reject_selection = reject_selection

    def bounds(self) -> Bounds:
        return self.current

    def set_bounds(self, bounds: Bounds) -> None:
        self.current = bounds

    def is_iconified(self) -> bool:
        return self.iconified

    def set_iconified(self, iconified: bool) -> None:
        self.iconified = iconified

    def select(self) -> None:
        if self.reject_selection:
            raise SelectionRejected("vetoed")
        self.selected = True

    def is_displayable(self) -> bool:
        return self.displayable

    def dispose(self) -> None:
        self.displayable = False


class HookedSubWindow(FakeSubWindow):
    def __init__(self, kind: WindowKind) -> None:
        super().__init__(kind)
        self.shutdown_calls = 0

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class FakeDisplay:
    def __init__(self, size: Size = FULL_HD) -> None:
        self.size = size

    def screen_size(self) -> Size:
        return self.size


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    logger = py_logging.getLogger("robodesk")
    yield
    logger.handlers.clear()
    logger.setLevel(py_logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def session_path(tmp_path: Path) -> Path:
    return tmp_path / "profile" / "robots_config.properties"


@pytest.fixture
def store(session_path: Path) -> ConfigStore:
    return ConfigStore(session_path)


@pytest.fixture
def localizer() -> Localizer:
    return Localizer("en")


@pytest.fixture
def display() -> FakeDisplay:
    return FakeDisplay()


@pytest.fixture
def registry(localizer: Localizer) -> WindowRegistry:
    windows = WindowRegistry(localizer)
    windows.initialize(FakeSubWindow)
    return windows


@pytest.fixture
def manager(
    store: ConfigStore,
    registry: WindowRegistry,
    display: FakeDisplay,
    localizer: Localizer,
) -> WindowStateManager:
    return WindowStateManager(store, registry, display, localizer)


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
