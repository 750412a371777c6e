from __future__ import annotations

from PyQt6.QtCore import QPoint, QPointF, QRect, QSize  # type: ignore[import]

from .state import Point, Rect, Size


def to_qrect(r: Rect) -> QRect:
    return QRect(r.x, r.y, r.width, r.height)


def to_qpoint(p: Point) -> QPoint:
    return QPoint(p.x, p.y)


def from_qpoint(p: QPoint | QPointF) -> Point:
    if isinstance(p, QPointF):
        p = p.toPoint()
    return Point(p.x(), p.y())


def from_qsize(s: QSize) -> Size:
    return Size(max(0, s.width()), max(0, s.height()))
