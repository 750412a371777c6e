"""Zoom/pan geometry for a single image inside a rectangular container.

Every function here is pure: it takes a :class:`ViewportState` (or plain
sizes) and returns a new value. The widget shell keeps the one mutable
reference and decides what to repaint.
"""

from __future__ import annotations

from dataclasses import replace

from ..ui.state import (
    AnchorMode,
    DragSession,
    LayoutMode,
    Point,
    Rect,
    Size,
    ViewportState,
    ZoomLimits,
    round_px,
)

# 이 값 이하의 배율 변화는 무시(부동소수 누적 방지)
ZOOM_EPSILON = 0.001
# 이 배율을 넘으면 최근접 보간으로 픽셀 경계를 그대로 보여줌
SMOOTH_SCALING_MAX_ZOOM = 4.0


class InvalidImageError(ValueError):
    """Raised when an image with a zero or negative dimension is attached."""


def fit_to_container(source_size: Size | None, container_size: Size) -> float:
    if source_size is None or source_size.is_empty() or container_size.is_empty():
        return 1.0
    source_aspect = source_size.width / source_size.height
    target_aspect = container_size.width / container_size.height
    if source_aspect > target_aspect:
        return container_size.width / source_size.width
    return container_size.height / source_size.height


def center_bounds(source_size: Size | None, zoom_factor: float, container_size: Size) -> Rect:
    if source_size is None:
        return Rect()
    w = round_px(source_size.width * zoom_factor)
    h = round_px(source_size.height * zoom_factor)
    x = (container_size.width - w) // 2
    y = (container_size.height - h) // 2
    return Rect(x, y, w, h)


def clamp_zoom(requested: float, limits: ZoomLimits, source_size: Size | None) -> float:
    """Clamp ``requested`` to the ceiling, then to the minimum pixel floors.

    The floors are checked last, so a large minimum size can push the result
    above ``limits.maximum_zoom_factor``.
    """
    if source_size is None or source_size.is_empty():
        return 1.0
    zoom = min(float(requested), float(limits.maximum_zoom_factor))
    if source_size.width * zoom < limits.minimum_image_width:
        zoom = limits.minimum_image_width / source_size.width
    if source_size.height * zoom < limits.minimum_image_height:
        zoom = limits.minimum_image_height / source_size.height
    return zoom


def resolve_anchor(mode: AnchorMode, image_bounds: Rect, control_size: Size,
                   pointer: Point | None = None) -> Point:
    if mode is AnchorMode.MOUSE_POSITION and pointer is not None:
        return Point(pointer.x - image_bounds.x, pointer.y - image_bounds.y)
    if mode is AnchorMode.IMAGE_CENTER:
        return Point(image_bounds.width // 2, image_bounds.height // 2)
    if mode in (AnchorMode.CONTROL_CENTER, AnchorMode.MOUSE_POSITION):
        # 포인터 위치를 모르면 컨트롤 중앙으로 대체
        return Point(control_size.width // 2 - image_bounds.x,
                     control_size.height // 2 - image_bounds.y)
    raise ValueError(f"unknown anchor mode: {mode!r}")


def apply_zoom(state: ViewportState, new_zoom: float, mode: AnchorMode,
               pointer: Point | None = None) -> ViewportState:
    """Rescale the image bounds so the anchor chosen by ``mode`` stays put."""
    src = state.source_size
    if src is None:
        return state
    bounds = state.image_bounds
    if bounds.width <= 0:
        # 경계가 외부에서 비워진 경우: 나눗셈 대신 재중앙
        return replace(state, zoom_factor=new_zoom,
                       image_bounds=center_bounds(src, new_zoom, state.container_size))

    anchor = resolve_anchor(mode, bounds, state.container_size, pointer)
    previous = bounds.width / src.width
    if abs(new_zoom - previous) <= ZOOM_EPSILON:
        return replace(state, zoom_factor=new_zoom)

    ratio = new_zoom / previous
    moved = Point(round_px(anchor.x * ratio), round_px(anchor.y * ratio))
    new_bounds = Rect(
        bounds.x + anchor.x - moved.x,
        bounds.y + anchor.y - moved.y,
        round_px(src.width * new_zoom),
        round_px(src.height * new_zoom),
    )
    return replace(state, zoom_factor=new_zoom, image_bounds=new_bounds)


def set_zoom(state: ViewportState, requested: float, limits: ZoomLimits, mode: AnchorMode,
             pointer: Point | None = None) -> ViewportState:
    if not state.has_image:
        return state
    return apply_zoom(state, clamp_zoom(requested, limits, state.source_size), mode, pointer)


def wheel_zoom_factor(current_zoom: float, delta: int, divisor: int) -> float:
    if divisor <= 0:
        raise ValueError("wheel divisor must be positive")
    return current_zoom * (1.0 + float(delta) / divisor)


def begin_drag(pointer: Point, enabled: bool = True) -> DragSession | None:
    if not enabled:
        return None
    return DragSession(last_pointer=pointer)


def update_drag(state: ViewportState, session: DragSession,
                pointer: Point) -> tuple[ViewportState, DragSession]:
    delta = pointer - session.last_pointer
    next_session = DragSession(last_pointer=pointer)
    if not state.has_image:
        return state, next_session
    return state.with_bounds(state.image_bounds.translated(delta.x, delta.y)), next_session


def end_drag(session: DragSession | None) -> None:
    return None


def move_image(state: ViewportState, position: Point) -> ViewportState:
    if not state.has_image:
        return state
    return state.with_bounds(state.image_bounds.moved_to(position))


def apply_layout_mode(mode: LayoutMode, source_size: Size | None, container_size: Size) -> Size:
    if source_size is None or source_size.is_empty():
        return container_size
    if mode is LayoutMode.SCROLLABLE:
        return Size(source_size.width, source_size.height)
    if mode is not LayoutMode.RATIO_STRETCH:
        raise ValueError(f"unknown layout mode: {mode!r}")

    cw, ch = container_size.width, container_size.height
    if cw >= source_size.width and ch >= source_size.height:
        # 원본보다 크게 늘리지 않음
        return Size(source_size.width, source_size.height)
    if container_size.is_empty():
        return container_size
    image_ratio = source_size.width / source_size.height
    if image_ratio >= cw / ch:
        return Size(cw, max(1, round_px(cw / image_ratio)))
    return Size(max(1, round_px(ch * image_ratio)), ch)


def attach_image(state: ViewportState, source_size: Size, limits: ZoomLimits) -> ViewportState:
    if source_size.width <= 0 or source_size.height <= 0:
        raise InvalidImageError(
            f"image must have positive dimensions, got {source_size.width}x{source_size.height}")
    zoom = clamp_zoom(fit_to_container(source_size, state.container_size), limits, source_size)
    return ViewportState(
        zoom_factor=zoom,
        image_bounds=center_bounds(source_size, zoom, state.container_size),
        container_size=state.container_size,
        source_size=source_size,
    )


def detach_image(state: ViewportState) -> ViewportState:
    return ViewportState(container_size=state.container_size)


def resize_container(state: ViewportState, container_size: Size, limits: ZoomLimits) -> ViewportState:
    if not state.has_image:
        return replace(state, container_size=container_size)
    zoom = clamp_zoom(fit_to_container(state.source_size, container_size), limits, state.source_size)
    return replace(
        state,
        zoom_factor=zoom,
        container_size=container_size,
        image_bounds=center_bounds(state.source_size, zoom, container_size),
    )


def use_smooth_scaling(zoom_factor: float) -> bool:
    return zoom_factor <= SMOOTH_SCALING_MAX_ZOOM
