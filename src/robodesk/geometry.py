"""Rectangle validation and centering against a display size."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def clamped_to(self, minimum: Size) -> Size:
        return Size(max(self.width, minimum.width), max(self.height, minimum.height))


@dataclass(frozen=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @classmethod
    def of(cls, position: Point, size: Size) -> Bounds:
        return cls(position.x, position.y, size.width, size.height)

    def moved_to(self, position: Point) -> Bounds:
        return Bounds(position.x, position.y, self.width, self.height)


def fits(bounds: Bounds, screen: Size) -> bool:
    return (
        bounds.x >= 0
        and bounds.y >= 0
        and bounds.x + bounds.width <= screen.width
        and bounds.y + bounds.height <= screen.height
    )


def center(size: Size, screen: Size) -> Point:
    """Return the origin that centers `size` on `screen`.

    The result is negative on an axis where `size` exceeds the screen; it is
    returned unclamped so an oversized window stays symmetric around the
    display center.
    """
    return Point((screen.width - size.width) // 2, (screen.height - size.height) // 2)
