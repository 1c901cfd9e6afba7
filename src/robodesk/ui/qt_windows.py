"""PySide6 implementations of the window, display and prompt interfaces."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Mapping

from PySide6.QtCore import QEvent, QPointF, Qt, QTimer
from PySide6.QtGui import QBrush, QColor, QGuiApplication, QPainter
from PySide6.QtWidgets import (
    QLabel,
    QMainWindow,
    QMdiArea,
    QMdiSubWindow,
    QMessageBox,
    QPlainTextEdit,
    QWidget,
)

from robodesk.geometry import Bounds, Size
from robodesk.i18n import Localizer
from robodesk.lifecycle import ExitChoice, ShutdownReport
from robodesk.logging import attach_handler, detach_handler
from robodesk.model import RobotModel, RobotPosition
from robodesk.models import ExtendedState, WindowKind
from robodesk.windows import SelectionRejected, StateListener

logger = py_logging.getLogger(__name__)

_TICK_INTERVAL_MS = 10


def _to_extended_state(flags: Qt.WindowState) -> ExtendedState:
    if flags & Qt.WindowState.WindowMinimized:
        return ExtendedState.ICONIFIED
    if flags & Qt.WindowState.WindowMaximized:
        return ExtendedState.MAXIMIZED
    return ExtendedState.NORMAL


def _to_qt_state(state: ExtendedState) -> Qt.WindowState:
    if state == ExtendedState.ICONIFIED:
        return Qt.WindowState.WindowMinimized
    if state == ExtendedState.MAXIMIZED:
        return Qt.WindowState.WindowMaximized
    return Qt.WindowState.WindowNoState


class QtDisplay:
    def screen_size(self) -> Size:
        screen = QGuiApplication.primaryScreen()
        size = screen.size()
        return Size(size.width(), size.height())


def schedule_on_event_queue(callback: Callable[[], object]) -> None:
    QTimer.singleShot(0, callback)


class ShellMainWindow(QMainWindow):  # pragma: no cover
    def __init__(self, localizer: Localizer) -> None:
        super().__init__()
        self.localizer = localizer
        self.mdi_area = QMdiArea(self)
        self.setCentralWidget(self.mdi_area)
        self.setWindowTitle(localizer.get_string("app.title"))
        self._listeners: list[StateListener] = []
        self._disposed = False
        self.close_requested: Callable[[], ShutdownReport] | None = None

    def extended_state(self) -> ExtendedState:
        return _to_extended_state(self.windowState())

    def set_extended_state(self, state: ExtendedState) -> None:
        self.setWindowState(_to_qt_state(state))

    def bounds(self) -> Bounds:
        geometry = self.geometry()
        return Bounds(self.x(), self.y(), geometry.width(), geometry.height())

    def set_bounds(self, bounds: Bounds) -> None:
        self.move(bounds.x, bounds.y)
        self.resize(bounds.width, bounds.height)

    def set_minimum_size(self, size: Size) -> None:
        self.setMinimumSize(size.width, size.height)

    def add_state_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def is_displayable(self) -> bool:
        return not self._disposed

    def dispose(self) -> None:
        self._disposed = True
        self.close()
        self.deleteLater()

    def changeEvent(self, event) -> None:  # type: ignore[override]
        if event.type() == QEvent.Type.WindowStateChange:
            old = _to_extended_state(event.oldState())
            new = self.extended_state()
            if old != new:
                for listener in list(self._listeners):
                    listener(old, new)
        super().changeEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        if self._disposed or self.close_requested is None:
            event.accept()
            return
        report = self.close_requested()
        if report.confirmed:
            event.accept()
        else:
            event.ignore()


class ShellSubWindow(QMdiSubWindow):  # pragma: no cover
    def __init__(self, kind: WindowKind, content: QWidget, localizer: Localizer) -> None:
        super().__init__()
        self.kind = kind
        self.setWidget(content)
        self.setWindowTitle(localizer.get_string(kind.title_key))
        self._disposed = False

    def bounds(self) -> Bounds:
        geometry = self.geometry()
        return Bounds(geometry.x(), geometry.y(), geometry.width(), geometry.height())

    def set_bounds(self, bounds: Bounds) -> None:
        self.setGeometry(bounds.x, bounds.y, bounds.width, bounds.height)

    def is_iconified(self) -> bool:
        return self.isMinimized()

    def set_iconified(self, iconified: bool) -> None:
        if iconified:
            self.showMinimized()
        else:
            self.showNormal()

    def select(self) -> None:
        area = self.mdiArea()
        if area is None:
            raise SelectionRejected(f"{self.kind.stable_id} is not attached to a desktop area")
        self.show()
        area.setActiveSubWindow(self)

    def is_displayable(self) -> bool:
        return not self._disposed

    def dispose(self) -> None:
        self._disposed = True
        self.close()
        self.deleteLater()


class LogRecordHandler(py_logging.Handler):  # pragma: no cover
    def __init__(self, view: QPlainTextEdit) -> None:
        super().__init__(py_logging.DEBUG)
        self.view = view

    def emit(self, record: py_logging.LogRecord) -> None:
        self.view.appendPlainText(self.format(record))


class LogSubWindow(ShellSubWindow):  # pragma: no cover
    def __init__(self, localizer: Localizer) -> None:
        view = QPlainTextEdit()
        view.setReadOnly(True)
        super().__init__(WindowKind.LOG, view, localizer)
        self._handler = LogRecordHandler(view)
        attach_handler(self._handler)

    def shutdown(self) -> None:
        detach_handler(self._handler)


class RobotField(QWidget):  # pragma: no cover
    def __init__(self, model: RobotModel) -> None:
        super().__init__()
        self.model = model

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        point = event.position()
        self.model.set_target(point.x(), point.y())
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        position = self.model.position
        painter.setBrush(QBrush(QColor("magenta")))
        painter.drawEllipse(QPointF(position.x, position.y), 15, 5)
        painter.setBrush(QBrush(QColor("green")))
        painter.drawEllipse(QPointF(self.model.target_x, self.model.target_y), 3, 3)
        painter.end()


class GameSubWindow(ShellSubWindow):  # pragma: no cover
    def __init__(self, model: RobotModel, localizer: Localizer) -> None:
        field = RobotField(model)
        super().__init__(WindowKind.GAME, field, localizer)
        self.field = field
        self.model = model
        self.timer = QTimer(self)
        self.timer.timeout.connect(self._tick)
        self.timer.start(_TICK_INTERVAL_MS)

    def _tick(self) -> None:
        if self.model.tick(_TICK_INTERVAL_MS):
            self.field.update()

    def shutdown(self) -> None:
        self.timer.stop()


class CoordinatesSubWindow(ShellSubWindow):  # pragma: no cover
    def __init__(self, model: RobotModel, localizer: Localizer) -> None:
        label = QLabel()
        super().__init__(WindowKind.COORDINATES, label, localizer)
        self.label = label
        model.add_observer(self._show)
        self._show(model.position)

    def _show(self, position: RobotPosition) -> None:
        self.label.setText(f"x={position.x:.1f}  y={position.y:.1f}")


def confirm_exit(  # pragma: no cover
    parent: QWidget,
) -> Callable[[str, str, Mapping[ExitChoice, str]], ExitChoice]:
    def prompt(text: str, title: str, buttons: Mapping[ExitChoice, str]) -> ExitChoice:
        dialog = QMessageBox(parent)
        dialog.setIcon(QMessageBox.Icon.Question)
        dialog.setWindowTitle(title)
        dialog.setText(text)
        yes_btn = dialog.addButton(buttons[ExitChoice.YES], QMessageBox.ButtonRole.YesRole)
        no_btn = dialog.addButton(buttons[ExitChoice.NO], QMessageBox.ButtonRole.NoRole)
        dialog.addButton(buttons[ExitChoice.CANCEL], QMessageBox.ButtonRole.RejectRole)
        dialog.exec()
        clicked = dialog.clickedButton()
        if clicked is yes_btn:
            return ExitChoice.YES
        if clicked is no_btn:
            return ExitChoice.NO
        return ExitChoice.CANCEL

    return prompt
