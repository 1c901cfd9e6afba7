"""Desktop shell wiring: windows, session state and exit handling."""

from __future__ import annotations

import logging as py_logging
import sys
from dataclasses import dataclass

from robodesk.config_store import ConfigStore
from robodesk.errors import ExitCode, UiUnavailableError
from robodesk.i18n import Localizer
from robodesk.settings import AppSettings
from robodesk.window_state import WindowStateManager
from robodesk.windows import Display, WindowRegistry

logger = py_logging.getLogger(__name__)


@dataclass
class SessionServices:
    store: ConfigStore
    localizer: Localizer
    registry: WindowRegistry
    state_manager: WindowStateManager


def build_services(
    settings: AppSettings,
    display: Display,
    *,
    locale: str | None = None,
    fresh_start: bool = False,
) -> SessionServices:
    """Create the persistence services and resolve the interface language.

    An explicit `locale` wins over the persisted one, which wins over the
    configured default.
    """
    store = ConfigStore(settings.resolved_session_path())
    if fresh_start:
        store.delete()
    localizer = Localizer(settings.default_locale)
    registry = WindowRegistry(localizer)
    state_manager = WindowStateManager(
        store, registry, display, localizer, normal_size=settings.normal_size
    )

    saved_locale = state_manager.get_locale()
    for candidate in (locale, saved_locale):
        if candidate and candidate in localizer.available_locales():
            localizer.set_locale(candidate)
            break
    if locale and locale != localizer.current_locale:
        logger.warning("Ignoring unsupported locale=%s", locale)
    logger.debug(
        "Session services ready path=%s locale=%s", store.path, localizer.current_locale
    )
    return SessionServices(
        store=store, localizer=localizer, registry=registry, state_manager=state_manager
    )


def launch_app(
    settings: AppSettings,
    *,
    locale: str | None = None,
    fresh_start: bool = False,
) -> int:
    try:
        from PySide6.QtGui import QAction, QKeySequence
        from PySide6.QtWidgets import QApplication

        from robodesk.ui import qt_windows
    except ImportError as exc:
        raise UiUnavailableError(str(exc)) from exc

    from robodesk.lifecycle import LifecycleController
    from robodesk.model import RobotModel
    from robodesk.models import WindowKind

    app = QApplication.instance() or QApplication(sys.argv)  # pragma: no cover
    services = build_services(  # pragma: no cover
        settings, qt_windows.QtDisplay(), locale=locale, fresh_start=fresh_start
    )
    localizer = services.localizer  # pragma: no cover
    model = RobotModel()  # pragma: no cover
    main_window = qt_windows.ShellMainWindow(localizer)  # pragma: no cover

    def create_window(kind: WindowKind) -> qt_windows.ShellSubWindow:  # pragma: no cover
        if kind == WindowKind.LOG:
            window: qt_windows.ShellSubWindow = qt_windows.LogSubWindow(localizer)
        elif kind == WindowKind.GAME:
            window = qt_windows.GameSubWindow(model, localizer)
        else:
            window = qt_windows.CoordinatesSubWindow(model, localizer)
        main_window.mdi_area.addSubWindow(window)
        return window

    services.registry.initialize(create_window)  # pragma: no cover
    controller = LifecycleController(  # pragma: no cover
        services.state_manager,
        services.registry,
        main_window,
        model,
        localizer,
        confirm=qt_windows.confirm_exit(main_window),
        schedule=qt_windows.schedule_on_event_queue,
    )

    def apply_titles(_code: str = "") -> None:  # pragma: no cover
        main_window.setWindowTitle(localizer.get_string("app.title"))
        for window in services.registry:
            window.setWindowTitle(localizer.get_string(window.kind.title_key))

    localizer.add_listener(apply_titles)  # pragma: no cover
    menu = main_window.menuBar().addMenu("&File")  # pragma: no cover
    for code in localizer.available_locales():  # pragma: no cover
        action = QAction(code.upper(), main_window)
        action.triggered.connect(lambda _checked=False, value=code: controller.change_locale(value))
        menu.addAction(action)
    exit_action = QAction("E&xit", main_window)  # pragma: no cover
    exit_action.setShortcut(QKeySequence("Ctrl+Q"))  # pragma: no cover
    exit_action.triggered.connect(lambda: main_window.close())  # pragma: no cover
    menu.addAction(exit_action)  # pragma: no cover

    main_window.close_requested = controller.exit_requested  # pragma: no cover
    services.state_manager.load(main_window)  # pragma: no cover
    main_window.show()  # pragma: no cover
    app.exec()  # pragma: no cover
    return int(ExitCode.SUCCESS)  # pragma: no cover
