"""Save and restore of main-window and sub-window layout plus locale."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Iterable, Mapping

from robodesk.config_store import ConfigStore
from robodesk.geometry import Bounds, Size, center, fits
from robodesk.i18n import Localizer
from robodesk.models import (
    LOCALE_KEY,
    MAIN_PREFIX,
    ExtendedState,
    MainWindowRecord,
    SessionConfig,
    WindowRecord,
    parse_int,
)
from robodesk.windows import Display, MainWindow, SubWindow, WindowRegistry

logger = py_logging.getLogger(__name__)

DEFAULT_NORMAL_SIZE = Size(950, 850)
SUB_WINDOW_DEFAULTS = Bounds(50, 50, 300, 300)
_RESTORED_FROM = frozenset({ExtendedState.MAXIMIZED, ExtendedState.ICONIFIED})


def _parse_int(props: Mapping[str, str], key: str, default: int) -> int:
    raw = props.get(key)
    if raw is None:
        return default
    return parse_int(raw)


def _parse_bool(props: Mapping[str, str], key: str, default: bool) -> bool:
    raw = props.get(key)
    if raw is None:
        return default
    return raw.strip().lower() == "true"


class WindowStateManager:
    """Persists window layout through a `ConfigStore`.

    Loading never raises: a missing file maximizes the main window, corrupt
    values fall back to their defaults and rectangles that do not fit the
    current display are re-centered.
    """

    def __init__(
        self,
        store: ConfigStore,
        registry: WindowRegistry,
        display: Display,
        localizer: Localizer,
        *,
        normal_size: Size = DEFAULT_NORMAL_SIZE,
    ) -> None:
        self.store = store
        self.registry = registry
        self.display = display
        self.localizer = localizer
        self.normal_size = normal_size
        self._loading = False
        self._save_pending = False

    def _text(self, key: str) -> str:
        return self.localizer.get_string(key)

    # Save -----------------------------------------------------------------

    def capture(
        self,
        main_window: MainWindow,
        sub_windows: Iterable[SubWindow] | None = None,
        locale: str | None = None,
    ) -> SessionConfig:
        state = main_window.extended_state()
        if state == ExtendedState.NORMAL:
            live = main_window.bounds()
            size = live.size.clamped_to(self.normal_size)
            main = MainWindowRecord(
                state=state, x=live.x, y=live.y, width=size.width, height=size.height
            )
        else:
            main = MainWindowRecord(state=state)

        windows: dict[str, WindowRecord] = {}
        for window in self.registry.open_windows() if sub_windows is None else sub_windows:
            try:
                bounds = window.bounds()
                windows[window.kind.stable_id] = WindowRecord(
                    kind=window.kind,
                    x=bounds.x,
                    y=bounds.y,
                    width=bounds.width,
                    height=bounds.height,
                    iconified=window.is_iconified(),
                )
            except Exception as exc:
                logger.error(
                    "%s id=%s: %s",
                    self._text("internal.window.save.error"),
                    window.kind.stable_id,
                    exc,
                )

        resolved_locale = self.localizer.current_locale if locale is None else locale
        return SessionConfig(main=main, windows=windows, locale=resolved_locale.strip())

    def save(
        self,
        main_window: MainWindow,
        sub_windows: Iterable[SubWindow] | None = None,
        locale: str | None = None,
    ) -> SessionConfig:
        session = self.capture(main_window, sub_windows, locale)
        main = session.main
        if main.state == ExtendedState.NORMAL:
            logger.debug(
                "%s: x=%s, y=%s, width=%s, height=%s",
                self._text("saved.normal.state"),
                main.x,
                main.y,
                main.width,
                main.height,
            )
        else:
            logger.debug("%s: state=%s", self._text("saved.state"), int(main.state))
        self.store.update(session.to_properties(), self._text("window.state.config.comment"))
        return session

    # Load -----------------------------------------------------------------

    def on_state_changed(
        self,
        main_window: MainWindow,
        old: ExtendedState,
        new: ExtendedState,
    ) -> None:
        logger.debug("%s: old=%s, new=%s", self._text("window.state.changed"), int(old), int(new))
        if new != ExtendedState.NORMAL or old not in _RESTORED_FROM:
            return
        logger.debug(self._text("window.state.restored"))
        self._center(main_window, self.normal_size)
        if self._loading:
            self._save_pending = True
            return
        self.save(main_window)

    def _center(self, main_window: MainWindow, size: Size) -> None:
        origin = center(size, self.display.screen_size())
        main_window.set_bounds(Bounds.of(origin, size))
        logger.debug("%s: x=%s, y=%s", self._text("centering.window"), origin.x, origin.y)

    def load(
        self,
        main_window: MainWindow,
        sub_windows: Iterable[SubWindow] | None = None,
    ) -> ExtendedState:
        main_window.set_minimum_size(self.normal_size)
        main_window.add_state_listener(
            lambda old, new: self.on_state_changed(main_window, old, new)
        )

        if not self.store.exists():
            main_window.set_extended_state(ExtendedState.MAXIMIZED)
            logger.debug(self._text("first.launch.maximized"))
            return ExtendedState.MAXIMIZED

        props = self.store.load()
        windows = list(self.registry) if sub_windows is None else list(sub_windows)
        self._loading = True
        try:
            state = self._load_main(main_window, props)
            for window in windows:
                self._load_sub_window(window, props)
        finally:
            self._loading = False
        if self._save_pending:
            # a restore during load is persisted once the saved layout is applied
            self._save_pending = False
            self.save(main_window, windows if sub_windows is not None else None)
        return state

    def _load_main(self, main_window: MainWindow, props: Mapping[str, str]) -> ExtendedState:
        try:
            raw_state = props.get(f"{MAIN_PREFIX}.state")
            state = (
                ExtendedState.MAXIMIZED if raw_state is None else ExtendedState.parse(raw_state)
            )
            logger.debug("%s: state=%s", self._text("loaded.window.state"), int(state))
            if state != ExtendedState.NORMAL:
                main_window.set_extended_state(state)
                return state

            x = _parse_int(props, f"{MAIN_PREFIX}.x", -1)
            y = _parse_int(props, f"{MAIN_PREFIX}.y", -1)
            size = Size(
                _parse_int(props, f"{MAIN_PREFIX}.width", self.normal_size.width),
                _parse_int(props, f"{MAIN_PREFIX}.height", self.normal_size.height),
            ).clamped_to(self.normal_size)
        except ValueError as exc:
            logger.error("%s: %s", self._text("window.state.load.error"), exc)
            main_window.set_extended_state(ExtendedState.MAXIMIZED)
            logger.debug(self._text("load.error.maximized"))
            return ExtendedState.MAXIMIZED

        main_window.set_extended_state(ExtendedState.NORMAL)
        bounds = Bounds(x, y, size.width, size.height)
        if fits(bounds, self.display.screen_size()):
            main_window.set_bounds(bounds)
            logger.debug(
                "%s: x=%s, y=%s, width=%s, height=%s",
                self._text("set.saved.coordinates"),
                x,
                y,
                size.width,
                size.height,
            )
        else:
            logger.debug(
                "%s (x=%s, y=%s), %s",
                self._text("invalid.coordinates"),
                x,
                y,
                self._text("center.window"),
            )
            self._center(main_window, size)
        return ExtendedState.NORMAL

    def _load_sub_window(self, window: SubWindow, props: Mapping[str, str]) -> None:
        prefix = window.kind.stable_id
        try:
            bounds = Bounds(
                _parse_int(props, f"{prefix}.x", SUB_WINDOW_DEFAULTS.x),
                _parse_int(props, f"{prefix}.y", SUB_WINDOW_DEFAULTS.y),
                _parse_int(props, f"{prefix}.width", SUB_WINDOW_DEFAULTS.width),
                _parse_int(props, f"{prefix}.height", SUB_WINDOW_DEFAULTS.height),
            )
            iconified = _parse_bool(props, f"{prefix}.icon", False)
            window.set_bounds(bounds)
            window.set_iconified(iconified)
        except Exception as exc:
            logger.error(
                "%s id=%s: %s", self._text("internal.window.load.error"), prefix, exc
            )

    # Locale ---------------------------------------------------------------

    def get_locale(self) -> str | None:
        value = self.store.load().get(LOCALE_KEY)
        if value is None or not value.strip():
            return None
        return value.strip()

    def save_locale(self, code: str) -> bool:
        saved = self.store.update({LOCALE_KEY: code}, self._text("window.state.config.comment"))
        if saved:
            logger.debug("%s: %s", self._text("locale.saved"), code)
        return saved
