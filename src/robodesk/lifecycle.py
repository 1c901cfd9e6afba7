"""Confirmable shutdown: confirm, save, stop, dispose, verify."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from robodesk.i18n import Localizer
from robodesk.window_state import WindowStateManager
from robodesk.windows import DomainModel, MainWindow, WindowRegistry, shutdown_hook

logger = py_logging.getLogger(__name__)


class ExitChoice(str, Enum):
    YES = "yes"
    NO = "no"
    CANCEL = "cancel"


class ShutdownStep(str, Enum):
    SAVE = "save"
    WINDOW_HOOKS = "window-hooks"
    MODEL = "model"
    DISPOSE = "dispose"
    VERIFY = "verify-scheduled"


ConfirmPrompt = Callable[[str, str, Mapping[ExitChoice, str]], ExitChoice]
Scheduler = Callable[[Callable[[], object]], None]


@dataclass(frozen=True)
class StepFailure:
    step: ShutdownStep
    target: str
    error: BaseException


@dataclass
class ShutdownReport:
    confirmed: bool
    completed_steps: list[ShutdownStep] = field(default_factory=list)
    failures: list[StepFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.confirmed and not self.failures


class LifecycleController:
    def __init__(
        self,
        state_manager: WindowStateManager,
        registry: WindowRegistry,
        main_window: MainWindow,
        model: DomainModel,
        localizer: Localizer,
        *,
        confirm: ConfirmPrompt,
        schedule: Scheduler,
    ) -> None:
        self.state_manager = state_manager
        self.registry = registry
        self.main_window = main_window
        self.model = model
        self.localizer = localizer
        self.confirm = confirm
        self.schedule = schedule

    def exit_requested(
        self,
        prompt_key: str = "exit.confirmation",
        title_key: str = "exit.confirmation.title",
    ) -> ShutdownReport:
        text = self.localizer.get_string
        buttons = {
            ExitChoice.YES: text("yes.button"),
            ExitChoice.NO: text("no.button"),
            ExitChoice.CANCEL: text("cancel.button"),
        }
        choice = self.confirm(text(prompt_key), text(title_key), buttons)
        logger.info("Exit prompt result choice=%s", choice.value)
        if choice != ExitChoice.YES:
            return ShutdownReport(confirmed=False)
        return self.shutdown()

    def shutdown(self) -> ShutdownReport:
        """Run every teardown step in order, recording failures instead of stopping."""
        report = ShutdownReport(confirmed=True)
        windows = list(self.registry)

        self._run(report, ShutdownStep.SAVE, "session", self._save_session)

        hooks_ok = True
        for window in windows:
            hook = shutdown_hook(window)
            if hook is not None:
                hooks_ok &= self._attempt(
                    report, ShutdownStep.WINDOW_HOOKS, window.kind.stable_id, hook
                )
        if hooks_ok:
            report.completed_steps.append(ShutdownStep.WINDOW_HOOKS)

        self._run(report, ShutdownStep.MODEL, "model", self.model.shutdown)

        disposed_ok = True
        for window in windows:
            disposed_ok &= self._attempt(
                report, ShutdownStep.DISPOSE, window.kind.stable_id, window.dispose
            )
        disposed_ok &= self._attempt(report, ShutdownStep.DISPOSE, "main", self.main_window.dispose)
        if disposed_ok:
            report.completed_steps.append(ShutdownStep.DISPOSE)

        self._run(
            report, ShutdownStep.VERIFY, "event-queue", lambda: self.schedule(self.verify_closed)
        )

        if report.failures:
            logger.error(
                "Shutdown finished with failures steps=%s",
                ",".join(sorted({item.step.value for item in report.failures})),
            )
        return report

    def _save_session(self) -> None:
        self.state_manager.save(self.main_window, self.registry.open_windows())

    def _run(
        self,
        report: ShutdownReport,
        step: ShutdownStep,
        target: str,
        action: Callable[[], object],
    ) -> None:
        if self._attempt(report, step, target, action):
            report.completed_steps.append(step)

    def _attempt(
        self,
        report: ShutdownReport,
        step: ShutdownStep,
        target: str,
        action: Callable[[], object],
    ) -> bool:
        try:
            action()
        except Exception as exc:
            logger.exception(
                "%s step=%s target=%s",
                self.localizer.get_string("shutdown.step.failed"),
                step.value,
                target,
            )
            report.failures.append(StepFailure(step=step, target=target, error=exc))
            return False
        return True

    def verify_closed(self) -> bool:
        remaining = [window.kind.stable_id for window in self.registry if window.is_displayable()]
        if self.main_window.is_displayable():
            remaining.append("main")
        if remaining:
            logger.warning(
                "%s: %s",
                self.localizer.get_string("application.windows.remaining"),
                ", ".join(remaining),
            )
            return False
        logger.debug(self.localizer.get_string("application.closed.message"))
        return True

    def change_locale(self, code: str) -> None:
        self.localizer.set_locale(code)
        self.state_manager.save_locale(self.localizer.current_locale)
