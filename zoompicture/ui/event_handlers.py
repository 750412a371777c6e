from __future__ import annotations

from typing import TYPE_CHECKING
from PyQt6.QtCore import Qt  # type: ignore[import]
from PyQt6.QtGui import QImage  # type: ignore[import]

from ..services import viewport_engine as engine
from .state import Point, Size
from ..utils.logging_setup import get_logger

if TYPE_CHECKING:
    from .zoom_picture import ZoomPicture

_log = get_logger("ui.events")


def on_pointer_down(widget: "ZoomPicture", pos: Point, button) -> None:
    if button != Qt.MouseButton.LeftButton:
        return
    # 드래그 허용 여부는 시작 시점에만 확인
    widget._drag = engine.begin_drag(pos, widget.enableDragging())
    if widget._drag is not None:
        _log.debug("drag_begin | x=%d | y=%d", pos.x, pos.y)


def on_pointer_move(widget: "ZoomPicture", pos: Point) -> None:
    if widget._drag is None:
        return
    state, widget._drag = engine.update_drag(widget.viewportState(), widget._drag, pos)
    widget._set_state(state)


def on_pointer_up(widget: "ZoomPicture", pos: Point) -> None:
    if widget._drag is None:
        return
    widget._drag = engine.end_drag(widget._drag)
    _log.debug("drag_end | x=%d | y=%d", pos.x, pos.y)
    widget.update()


def on_pointer_wheel(widget: "ZoomPicture", pos: Point, delta: int) -> bool:
    if not widget.enableWheelZoom() or not delta:
        return False
    state = widget.viewportState()
    if not state.has_image or not widget.rect().contains(pos.x, pos.y):
        return False
    requested = engine.wheel_zoom_factor(state.zoom_factor, delta, widget.wheelDivisor())
    widget._set_state(engine.set_zoom(state, requested, widget.zoomLimits(), widget.anchorMode(), pos))
    return True


def on_resize(widget: "ZoomPicture", size: Size) -> None:
    state = widget.viewportState()
    if state.container_size == size:
        return
    widget._set_state(engine.resize_container(state, size, widget.zoomLimits()))


def drag_enter(widget: "ZoomPicture", event) -> None:
    md = event.mimeData()
    if md is not None and (md.hasUrls() or md.hasImage()):
        event.acceptProposedAction()
    else:
        event.ignore()


def drop(widget: "ZoomPicture", event) -> None:
    md = event.mimeData()
    if md is None:
        event.ignore()
        return
    if md.hasUrls():
        from ..dnd.dnd_handlers import urls_to_local_files, handle_dropped_files
        files = urls_to_local_files(md.urls())
        if not files:
            event.ignore()
            return
        handle_dropped_files(widget, files)
        event.acceptProposedAction()
        return
    if md.hasImage():
        data = md.imageData()
        img = QImage(data) if data is not None else QImage()
        if img.isNull():
            _log.info("dnd_drop_rejected | reason=null_image")
            event.ignore()
            return
        widget.setImage(img)
        event.acceptProposedAction()
        return
    event.ignore()
