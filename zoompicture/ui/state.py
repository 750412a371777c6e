from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum


def round_px(value: float) -> int:
    # 반올림(half-up): 파이썬 round()의 은행가 반올림 대신 픽셀 기준 일관성 유지
    return int(math.floor(value + 0.5))


class AnchorMode(Enum):
    MOUSE_POSITION = "mouse_position"
    CONTROL_CENTER = "control_center"
    IMAGE_CENTER = "image_center"


class LayoutMode(Enum):
    SCROLLABLE = "scrollable"
    RATIO_STRETCH = "ratio_stretch"


@dataclass(frozen=True)
class Size:
    width: int = 0
    height: int = 0

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Point:
    x: int = 0
    y: int = 0

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def translated(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def moved_to(self, p: Point) -> "Rect":
        return Rect(p.x, p.y, self.width, self.height)


@dataclass(frozen=True)
class ZoomLimits:
    minimum_image_width: int = 10
    minimum_image_height: int = 10
    maximum_zoom_factor: float = 64.0

    def __post_init__(self) -> None:
        if int(self.minimum_image_width) < 1 or int(self.minimum_image_height) < 1:
            raise ValueError("minimum image size must be at least 1 px")
        if not float(self.maximum_zoom_factor) > 0:
            raise ValueError("maximum_zoom_factor must be positive")


@dataclass(frozen=True)
class DragSession:
    last_pointer: Point


@dataclass(frozen=True)
class ViewportState:
    """Geometry of one attached image inside its container.

    ``source_size`` is ``None`` while no image is attached; the bounds are then
    empty and the zoom factor is the identity.
    """

    zoom_factor: float = 1.0
    image_bounds: Rect = field(default_factory=Rect)
    container_size: Size = field(default_factory=Size)
    source_size: Size | None = None

    @property
    def has_image(self) -> bool:
        return self.source_size is not None

    def with_bounds(self, bounds: Rect) -> "ViewportState":
        return replace(self, image_bounds=bounds)
