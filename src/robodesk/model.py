"""Robot domain model driven by the UI timer."""

from __future__ import annotations

import logging as py_logging
import math
from collections.abc import Callable
from dataclasses import dataclass

logger = py_logging.getLogger(__name__)

MAX_VELOCITY = 0.1
MAX_ANGULAR_VELOCITY = 0.001
TARGET_RADIUS = 0.5


@dataclass
class RobotPosition:
    x: float = 100.0
    y: float = 100.0
    direction: float = 0.0


def _normalize_angle(angle: float) -> float:
    return angle % (2 * math.pi)


class RobotModel:
    """Robot heading towards a target; observers are notified after each tick."""

    def __init__(self) -> None:
        self.position = RobotPosition()
        self.target_x = 150.0
        self.target_y = 100.0
        self._observers: list[Callable[[RobotPosition], None]] = []
        self._running = True

    @property
    def is_running(self) -> bool:
        return self._running

    def add_observer(self, callback: Callable[[RobotPosition], None]) -> None:
        self._observers.append(callback)

    def set_target(self, x: float, y: float) -> None:
        self.target_x = x
        self.target_y = y

    def tick(self, duration: float = 10.0) -> bool:
        if not self._running:
            return False
        dx = self.target_x - self.position.x
        dy = self.target_y - self.position.y
        if math.hypot(dx, dy) < TARGET_RADIUS:
            return False

        angle_to_target = _normalize_angle(math.atan2(dy, dx))
        delta = _normalize_angle(angle_to_target - self.position.direction)
        if delta > math.pi:
            angular = -MAX_ANGULAR_VELOCITY
        elif delta > 0:
            angular = MAX_ANGULAR_VELOCITY
        else:
            angular = 0.0

        direction = _normalize_angle(self.position.direction + angular * duration)
        self.position = RobotPosition(
            x=self.position.x + MAX_VELOCITY * duration * math.cos(direction),
            y=self.position.y + MAX_VELOCITY * duration * math.sin(direction),
            direction=direction,
        )
        for observer in list(self._observers):
            observer(self.position)
        return True

    def shutdown(self) -> None:
        if not self._running:
            return
        self._running = False
        self._observers.clear()
        logger.debug("Robot model stopped")
