"""Localized message lookup passed explicitly to the components that need it."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Mapping

from robodesk.errors import UnsupportedLocaleError

logger = py_logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "app.title": "Robots",
        "log.window.title": "Work log",
        "game.window.title": "Game field",
        "coordinates.window.title": "Robot coordinates",
        "yes.button": "Yes",
        "no.button": "No",
        "cancel.button": "Cancel",
        "exit.confirmation": "Do you really want to exit?",
        "exit.confirmation.title": "Exit confirmation",
        "application.closed.message": "Application closed, all windows released",
        "application.windows.remaining": "Windows still displayable after shutdown",
        "window.selection.error": "Window selection rejected",
        "window.state.changed": "Main window state changed",
        "window.state.restored": "Main window restored, resetting to normal size",
        "saved.normal.state": "Saved normal window state",
        "saved.state": "Saved window state",
        "first.launch.maximized": "First launch: main window maximized",
        "loaded.window.state": "Loaded window state",
        "invalid.coordinates": "Stored coordinates do not fit the display",
        "center.window": "centering window",
        "centering.window": "Centering window",
        "set.saved.coordinates": "Applied saved coordinates",
        "window.state.load.error": "Failed to load window state",
        "load.error.maximized": "Main window maximized after load error",
        "internal.window.load.error": "Failed to load sub-window state",
        "internal.window.save.error": "Failed to capture sub-window state",
        "window.state.config.comment": "Robots window configuration",
        "locale.saved": "Locale saved",
        "shutdown.step.failed": "Shutdown step failed",
    },
    "ru": {
        "app.title": "Роботы",
        "log.window.title": "Протокол работы",
        "game.window.title": "Игровое поле",
        "coordinates.window.title": "Координаты робота",
        "yes.button": "Да",
        "no.button": "Нет",
        "cancel.button": "Отмена",
        "exit.confirmation": "Вы действительно хотите выйти?",
        "exit.confirmation.title": "Подтверждение выхода",
        "application.closed.message": "Приложение закрыто, все окна освобождены",
        "application.windows.remaining": "После завершения остались отображаемые окна",
        "window.selection.error": "Выбор окна отклонён",
        "window.state.changed": "Состояние главного окна изменилось",
        "window.state.restored": "Главное окно восстановлено, возврат к обычному размеру",
        "saved.normal.state": "Сохранено обычное состояние окна",
        "saved.state": "Сохранено состояние окна",
        "first.launch.maximized": "Первый запуск: главное окно развёрнуто",
        "loaded.window.state": "Загружено состояние окна",
        "invalid.coordinates": "Сохранённые координаты не помещаются на экран",
        "center.window": "окно центрируется",
        "centering.window": "Центрирование окна",
        "set.saved.coordinates": "Применены сохранённые координаты",
        "window.state.load.error": "Ошибка загрузки состояния окна",
        "load.error.maximized": "Главное окно развёрнуто после ошибки загрузки",
        "internal.window.load.error": "Ошибка загрузки состояния внутреннего окна",
        "internal.window.save.error": "Ошибка чтения состояния внутреннего окна",
        "window.state.config.comment": "Конфигурация окон приложения Роботы",
        "locale.saved": "Язык сохранён",
        "shutdown.step.failed": "Шаг завершения работы не выполнен",
    },
}


class Localizer:
    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        *,
        catalogs: Mapping[str, Mapping[str, str]] | None = None,
    ) -> None:
        self._catalogs = catalogs if catalogs is not None else MESSAGES
        self._listeners: list[Callable[[str], None]] = []
        self._locale = locale if locale in self._catalogs else DEFAULT_LOCALE

    @property
    def current_locale(self) -> str:
        return self._locale

    def available_locales(self) -> tuple[str, ...]:
        return tuple(sorted(self._catalogs))

    def get_string(self, key: str) -> str:
        for code in (self._locale, DEFAULT_LOCALE):
            value = self._catalogs.get(code, {}).get(key)
            if value is not None:
                return value
        logger.debug("Missing message key=%s locale=%s", key, self._locale)
        return key

    def set_locale(self, code: str) -> None:
        normalized = code.strip().lower()
        if normalized not in self._catalogs:
            raise UnsupportedLocaleError(code, self.available_locales())
        if normalized == self._locale:
            return
        self._locale = normalized
        for listener in list(self._listeners):
            listener(normalized)

    def add_listener(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)
