from __future__ import annotations

import tempfile
from pathlib import Path

from conftest import FULL_HD, FakeDisplay, FakeMainWindow, FakeSubWindow
from hypothesis import given
from hypothesis import strategies as st

from robodesk.config_store import ConfigStore, format_properties, parse_properties
from robodesk.geometry import Bounds, Size, center, fits
from robodesk.i18n import Localizer
from robodesk.models import ExtendedState, WindowKind
from robodesk.window_state import DEFAULT_NORMAL_SIZE, WindowStateManager
from robodesk.windows import WindowRegistry

_TEXT = st.text(
    alphabet=st.one_of(
        st.characters(min_codepoint=32, max_codepoint=126),
        st.characters(min_codepoint=0x0400, max_codepoint=0x04FF),
        st.sampled_from("\t\n\r\f"),
    ),
    max_size=20,
)
_COORD = st.integers(min_value=-5000, max_value=5000)
_EXTENT = st.integers(min_value=0, max_value=5000)


def _manager(directory: str, screen: Size = FULL_HD) -> WindowStateManager:
    localizer = Localizer()
    registry = WindowRegistry(localizer)
    registry.initialize(FakeSubWindow)
    store = ConfigStore(Path(directory) / "robots_config.properties")
    return WindowStateManager(store, registry, FakeDisplay(screen), localizer)


@st.composite
def _screen_and_fitting_bounds(draw: st.DrawFn) -> tuple[Size, Bounds]:
    screen = Size(
        draw(st.integers(min_value=DEFAULT_NORMAL_SIZE.width, max_value=3840)),
        draw(st.integers(min_value=DEFAULT_NORMAL_SIZE.height, max_value=2160)),
    )
    width = draw(st.integers(min_value=DEFAULT_NORMAL_SIZE.width, max_value=screen.width))
    height = draw(st.integers(min_value=DEFAULT_NORMAL_SIZE.height, max_value=screen.height))
    x = draw(st.integers(min_value=0, max_value=screen.width - width))
    y = draw(st.integers(min_value=0, max_value=screen.height - height))
    return screen, Bounds(x, y, width, height)


@given(st.dictionaries(_TEXT, _TEXT, max_size=10))
def test_properties_text_preserves_every_entry(mapping: dict[str, str]) -> None:
    text = format_properties(mapping, comment="Robots window configuration")

    assert parse_properties(text) == mapping


@given(_screen_and_fitting_bounds())
def test_normal_main_window_restores_saved_bounds(case: tuple[Size, Bounds]) -> None:
    screen, bounds = case
    with tempfile.TemporaryDirectory() as directory:
        _manager(directory, screen).save(FakeMainWindow(ExtendedState.NORMAL, bounds))

        restored = FakeMainWindow(ExtendedState.NORMAL, Bounds(0, 0, 1, 1))
        state = _manager(directory, screen).load(restored)

    assert state == ExtendedState.NORMAL
    assert restored.bounds() == bounds


@given(_COORD, _COORD, _EXTENT, _EXTENT)
def test_saved_main_size_never_drops_below_normal_size(
    x: int, y: int, width: int, height: int
) -> None:
    with tempfile.TemporaryDirectory() as directory:
        manager = _manager(directory)
        session = manager.save(FakeMainWindow(ExtendedState.NORMAL, Bounds(x, y, width, height)))

    assert session.main.width == max(width, DEFAULT_NORMAL_SIZE.width)
    assert session.main.height == max(height, DEFAULT_NORMAL_SIZE.height)
    assert (session.main.x, session.main.y) == (x, y)


@given(_COORD, _COORD, _EXTENT, _EXTENT)
def test_loaded_main_window_fits_or_is_centered(x: int, y: int, width: int, height: int) -> None:
    with tempfile.TemporaryDirectory() as directory:
        manager = _manager(directory)
        manager.store.save(
            {
                "main.state": "0",
                "main.x": str(x),
                "main.y": str(y),
                "main.width": str(width),
                "main.height": str(height),
            }
        )
        main = FakeMainWindow(ExtendedState.NORMAL, Bounds(0, 0, 1, 1))
        manager.load(main)

    size = Size(width, height).clamped_to(DEFAULT_NORMAL_SIZE)
    requested = Bounds(x, y, size.width, size.height)
    if fits(requested, FULL_HD):
        assert main.bounds() == requested
    else:
        assert main.bounds() == Bounds.of(center(size, FULL_HD), size)


@given(
    st.sampled_from(list(ExtendedState)),
    st.lists(st.tuples(_COORD, _COORD, _EXTENT, _EXTENT, st.booleans()), min_size=3, max_size=3),
)
def test_saving_twice_writes_the_same_properties(
    state: ExtendedState, windows: list[tuple[int, int, int, int, bool]]
) -> None:
    with tempfile.TemporaryDirectory() as directory:
        manager = _manager(directory)
        for window, (x, y, width, height, iconified) in zip(manager.registry, windows):
            window.set_bounds(Bounds(x, y, width, height))
            window.set_iconified(iconified)
        main = FakeMainWindow(state, Bounds(20, 20, 1000, 900))

        manager.save(main)
        first = manager.store.load()
        manager.save(main)
        second = manager.store.load()

    assert first == second


@given(_COORD, _COORD, _EXTENT, _EXTENT, st.booleans())
def test_sub_window_bounds_round_trip(
    x: int, y: int, width: int, height: int, iconified: bool
) -> None:
    with tempfile.TemporaryDirectory() as directory:
        manager = _manager(directory)
        game = manager.registry.get(WindowKind.GAME)
        game.set_bounds(Bounds(x, y, width, height))
        game.set_iconified(iconified)
        manager.save(FakeMainWindow(ExtendedState.MAXIMIZED))

        reloaded = _manager(directory)
        reloaded.load(FakeMainWindow())
        restored = reloaded.registry.get(WindowKind.GAME)

    assert restored.bounds() == Bounds(x, y, width, height)
    assert restored.is_iconified() is iconified
