from __future__ import annotations

import logging as py_logging

import pytest
from conftest import FakeMainWindow, FakeSubWindow

from robodesk.config_store import ConfigStore
from robodesk.geometry import Bounds, Size
from robodesk.models import ExtendedState, WindowKind
from robodesk.window_state import DEFAULT_NORMAL_SIZE, WindowStateManager
from robodesk.windows import WindowRegistry


def _normal(x: int, y: int, width: int, height: int) -> dict[str, str]:
    return {
        "main.state": "0",
        "main.x": str(x),
        "main.y": str(y),
        "main.width": str(width),
        "main.height": str(height),
    }


def test_first_launch_maximizes_without_reading_fields(
    manager: WindowStateManager, store: ConfigStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    main = FakeMainWindow()

    def forbidden_load() -> dict[str, str]:
        raise AssertionError("load must not be called without a backing file")

    monkeypatch.setattr(store, "load", forbidden_load)
    state = manager.load(main)

    assert state == ExtendedState.MAXIMIZED
    assert main.state == ExtendedState.MAXIMIZED
    assert main.minimum == DEFAULT_NORMAL_SIZE
    assert len(main.listeners) == 1


def test_missing_state_key_defaults_to_maximized(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save({"locale": "en"})
    main = FakeMainWindow()

    assert manager.load(main) == ExtendedState.MAXIMIZED
    assert main.state == ExtendedState.MAXIMIZED


def test_corrupt_state_falls_back_to_maximized_and_logs(
    manager: WindowStateManager, store: ConfigStore, caplog: pytest.LogCaptureFixture
) -> None:
    store.save({"main.state": "abc"})
    main = FakeMainWindow()

    with caplog.at_level(py_logging.ERROR, logger="robodesk.window_state"):
        state = manager.load(main)

    assert state == ExtendedState.MAXIMIZED
    assert main.state == ExtendedState.MAXIMIZED
    assert "Failed to load window state" in caplog.text


def test_corrupt_main_geometry_falls_back_to_maximized(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    values = _normal(10, 10, 1000, 900)
    values["main.width"] = "wide"
    store.save(values)
    main = FakeMainWindow(bounds=Bounds(1, 1, 1, 1))

    assert manager.load(main) == ExtendedState.MAXIMIZED
    assert main.bounds() == Bounds(1, 1, 1, 1)


def test_iconified_state_is_applied(manager: WindowStateManager, store: ConfigStore) -> None:
    store.save({"main.state": "1"})
    main = FakeMainWindow()

    assert manager.load(main) == ExtendedState.ICONIFIED
    assert main.state == ExtendedState.ICONIFIED


def test_valid_normal_geometry_is_applied_verbatim(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save(_normal(100, 50, 1000, 900))
    main = FakeMainWindow()

    assert manager.load(main) == ExtendedState.NORMAL
    assert main.bounds() == Bounds(100, 50, 1000, 900)


def test_small_stored_size_is_clamped_to_minimum(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save(_normal(10, 20, 300, 200))
    main = FakeMainWindow()

    manager.load(main)

    assert main.bounds() == Bounds(10, 20, 950, 850)


def test_missing_geometry_keys_center_at_minimum_size(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save({"main.state": "0"})
    main = FakeMainWindow()

    manager.load(main)

    assert main.bounds() == Bounds(485, 115, 950, 850)


def test_out_of_bounds_rectangle_is_centered(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save(_normal(1500, 100, 1000, 900))
    main = FakeMainWindow()

    manager.load(main)

    assert main.bounds() == Bounds(460, 90, 1000, 900)


def test_oversized_window_is_centered_with_negative_origin(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save(_normal(100, 100, 2000, 2000))
    main = FakeMainWindow()

    manager.load(main)

    assert main.bounds() == Bounds(-40, -460, 2000, 2000)


def test_sub_window_without_entries_gets_defaults(
    manager: WindowStateManager, store: ConfigStore, registry: WindowRegistry
) -> None:
    store.save({"main.state": "6"})
    log_window = registry.get(WindowKind.LOG)
    log_window.set_iconified(True)

    manager.load(FakeMainWindow())

    assert log_window.bounds() == Bounds(50, 50, 300, 300)
    assert log_window.is_iconified() is False


def test_sub_window_entries_are_applied(
    manager: WindowStateManager, store: ConfigStore, registry: WindowRegistry
) -> None:
    store.save(
        {
            "main.state": "6",
            "game.x": "7",
            "game.y": "8",
            "game.width": "640",
            "game.height": "480",
            "game.icon": "TRUE",
        }
    )

    manager.load(FakeMainWindow())

    game = registry.get(WindowKind.GAME)
    assert game.bounds() == Bounds(7, 8, 640, 480)
    assert game.is_iconified() is True


def test_sub_window_parse_error_keeps_construction_default(
    manager: WindowStateManager,
    store: ConfigStore,
    registry: WindowRegistry,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store.save({"main.state": "6", "log.x": "left", "game.x": "70"})

    with caplog.at_level(py_logging.ERROR, logger="robodesk.window_state"):
        manager.load(FakeMainWindow())

    assert registry.get(WindowKind.LOG).bounds() == WindowKind.LOG.initial_bounds
    assert registry.get(WindowKind.GAME).bounds() == Bounds(70, 50, 300, 300)
    assert "Failed to load sub-window state id=log" in caplog.text


def test_sub_windows_load_even_when_main_state_is_corrupt(
    manager: WindowStateManager, store: ConfigStore, registry: WindowRegistry
) -> None:
    store.save({"main.state": "??", "coordinates.x": "5"})

    manager.load(FakeMainWindow())

    assert registry.get(WindowKind.COORDINATES).bounds() == Bounds(5, 50, 300, 300)


def test_explicit_sub_windows_override_registry(
    manager: WindowStateManager, store: ConfigStore, registry: WindowRegistry
) -> None:
    store.save({"main.state": "6"})
    extra = FakeSubWindow(WindowKind.LOG)

    manager.load(FakeMainWindow(), [extra])

    assert extra.bounds() == Bounds(50, 50, 300, 300)
    assert registry.get(WindowKind.LOG).bounds() == WindowKind.LOG.initial_bounds


def test_custom_normal_size_is_used_for_clamping(
    store: ConfigStore, registry: WindowRegistry, localizer: object, display: object
) -> None:
    manager = WindowStateManager(
        store, registry, display, localizer, normal_size=Size(400, 300)  # type: ignore[arg-type]
    )
    store.save(_normal(0, 0, 100, 100))
    main = FakeMainWindow()

    manager.load(main)

    assert main.bounds() == Bounds(0, 0, 400, 300)
    assert main.minimum == Size(400, 300)


def test_underscore_separated_geometry_is_corrupt(
    manager: WindowStateManager, store: ConfigStore
) -> None:
    store.save(_normal(10, 10, 1000, 900) | {"main.width": "1_000"})
    main = FakeMainWindow()

    assert manager.load(main) == ExtendedState.MAXIMIZED
