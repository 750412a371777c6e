from __future__ import annotations

from dataclasses import replace

from PyQt6.QtWidgets import QWidget  # type: ignore[import]
from PyQt6.QtGui import QColor, QCursor, QImage, QPainter, QPixmap  # type: ignore[import]
from PyQt6.QtCore import Qt, QPoint, QRect, QSize, pyqtSignal  # type: ignore[import]

from . import event_handlers as handlers
from .state import AnchorMode, DragSession, LayoutMode, Point, Rect, Size, ViewportState, ZoomLimits
from .view_utils import from_qpoint, from_qsize, to_qpoint, to_qrect
from ..services import viewport_engine as engine
from ..services.image_service import ImageService
from ..storage.settings_store import ViewportConfig
from ..utils.logging_setup import get_logger


class ZoomPicture(QWidget):
    """Image viewport with wheel zoom, drag panning and fit-to-control layout.

    The widget keeps a single :class:`ViewportState`; all geometry changes go
    through :mod:`zoompicture.services.viewport_engine` and come back here via
    ``_set_state``, which repaints the old and new image bounds.
    """

    zoomChanged = pyqtSignal(float)
    boundsChanged = pyqtSignal(QRect)
    imageLoadFailed = pyqtSignal(str, str)  # path, error

    def __init__(self, parent=None, config: ViewportConfig | None = None):
        super().__init__(parent)
        self.log = get_logger("ui.ZoomPicture")
        self._pixmap = None  # type: QPixmap | None
        self._drag = None  # type: DragSession | None
        self._config = config or ViewportConfig()
        self._limits = self._config.zoom_limits()
        self._image_service = ImageService(self)
        self._background = QColor("#373737")
        self._state = ViewportState()

        self.setAcceptDrops(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(1, 1)
        self.resize(200, 200)
        self._state = ViewportState(container_size=from_qsize(self.size()))

    def sizeHint(self) -> QSize:
        return QSize(200, 200)

    # ----- 상태 -----
    def viewportState(self) -> ViewportState:
        return self._state

    def _set_state(self, state: ViewportState) -> None:
        old = self._state
        self._state = state
        if old.image_bounds != state.image_bounds:
            self.requestRedraw(old.image_bounds)
            self.requestRedraw(state.image_bounds)
            self.boundsChanged.emit(to_qrect(state.image_bounds))
        if old.zoom_factor != state.zoom_factor:
            self.zoomChanged.emit(state.zoom_factor)

    def _sync_container(self) -> None:
        # 숨겨진 위젯은 resizeEvent가 지연되므로 현재 크기를 직접 반영
        handlers.on_resize(self, from_qsize(self.size()))

    def requestRedraw(self, region: Rect) -> None:
        if region.is_empty():
            return
        self.update(to_qrect(region))

    # ----- 이미지 -----
    def setImage(self, image: QImage | QPixmap | None) -> None:
        if image is None:
            self._drag = None
            self._pixmap = None
            self._set_state(engine.detach_image(self._state))
            self.update()
            self.log.info("image_detach")
            return
        pixmap = QPixmap.fromImage(image) if isinstance(image, QImage) else image
        self._sync_container()
        source = Size(pixmap.width(), pixmap.height())
        try:
            state = engine.attach_image(self._state, source, self._limits)
        except engine.InvalidImageError:
            self.log.warning("image_attach_rejected | w=%d | h=%d", source.width, source.height)
            raise
        self._drag = None
        self._pixmap = pixmap
        self._set_state(state)
        self.update()
        self.log.info("image_attach | w=%d | h=%d | zoom=%.4f", source.width, source.height, state.zoom_factor)

    def image(self) -> QPixmap | None:
        return self._pixmap

    def loadImage(self, path: str) -> bool:
        _, img, ok, err = self._image_service.load(path)
        if not ok or img is None:
            self.imageLoadFailed.emit(path, err)
            return False
        try:
            self.setImage(img)
        except engine.InvalidImageError as e:
            self.imageLoadFailed.emit(path, str(e))
            return False
        return True

    # ----- 기하 -----
    def imageBounds(self) -> QRect:
        return to_qrect(self._state.image_bounds)

    def imagePosition(self) -> QPoint:
        return to_qpoint(self._state.image_bounds.origin)

    def setImagePosition(self, pos: QPoint) -> None:
        self._set_state(engine.move_image(self._state, from_qpoint(pos)))

    def zoomFactor(self) -> float:
        return self._state.zoom_factor

    def setZoomFactor(self, zoom: float, anchor: QPoint | None = None) -> None:
        if not self._state.has_image:
            return
        self._sync_container()
        pointer = None
        if anchor is not None:
            pointer = from_qpoint(anchor)
        elif self.underMouse():
            pointer = from_qpoint(self.mapFromGlobal(QCursor.pos()))
        self._set_state(engine.set_zoom(self._state, zoom, self._limits, self.anchorMode(), pointer))

    def applyLayout(self) -> None:
        if not self._state.has_image:
            return
        self._sync_container()
        target = engine.apply_layout_mode(self.layoutMode(), self._state.source_size, self._state.container_size)
        self.log.debug("layout_apply | mode=%s | w=%d | h=%d", self.layoutMode().name, target.width, target.height)
        self.resize(target.width, target.height)
        # 크기 확정 후 남는 여백 안에서 다시 중앙 정렬
        handlers.on_resize(self, target)

    # ----- 설정 -----
    def config(self) -> ViewportConfig:
        return replace(self._config)

    def applyConfig(self, config: ViewportConfig) -> None:
        if int(config.wheel_divisor) <= 0:
            raise ValueError("wheel_divisor must be positive")
        limits = config.zoom_limits()
        layout_changed = config.layout_mode != self._config.layout_mode
        self._config = replace(config)
        self._limits = limits
        if layout_changed:
            self.applyLayout()

    def _update_config(self, **changes) -> None:
        self.applyConfig(replace(self._config, **changes))

    def zoomLimits(self) -> ZoomLimits:
        return self._limits

    def enableDragging(self) -> bool:
        return self._config.enable_dragging

    def setEnableDragging(self, enabled: bool) -> None:
        self._update_config(enable_dragging=bool(enabled))

    def enableWheelZoom(self) -> bool:
        return self._config.enable_wheel_zoom

    def setEnableWheelZoom(self, enabled: bool) -> None:
        self._update_config(enable_wheel_zoom=bool(enabled))

    def maximumZoomFactor(self) -> float:
        return self._config.maximum_zoom_factor

    def setMaximumZoomFactor(self, value: float) -> None:
        self._update_config(maximum_zoom_factor=float(value))

    def minimumImageWidth(self) -> int:
        return self._config.minimum_image_width

    def setMinimumImageWidth(self, value: int) -> None:
        self._update_config(minimum_image_width=int(value))

    def minimumImageHeight(self) -> int:
        return self._config.minimum_image_height

    def setMinimumImageHeight(self, value: int) -> None:
        self._update_config(minimum_image_height=int(value))

    def wheelDivisor(self) -> int:
        return self._config.wheel_divisor

    def setWheelDivisor(self, value: int) -> None:
        self._update_config(wheel_divisor=int(value))

    def anchorMode(self) -> AnchorMode:
        return self._config.anchor_mode

    def setAnchorMode(self, mode: AnchorMode) -> None:
        self._update_config(anchor_mode=AnchorMode(mode))

    def layoutMode(self) -> LayoutMode:
        return self._config.layout_mode

    def setLayoutMode(self, mode: LayoutMode) -> None:
        self._config = replace(self._config, layout_mode=LayoutMode(mode))
        self.applyLayout()

    # ----- Events -----
    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), self._background)
            if self._pixmap is not None and self._state.has_image:
                # 4배 초과 확대에서는 최근접 보간으로 픽셀 경계 유지
                painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform,
                                      engine.use_smooth_scaling(self._state.zoom_factor))
                painter.drawPixmap(to_qrect(self._state.image_bounds), self._pixmap)
        finally:
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        handlers.on_resize(self, from_qsize(event.size()))

    def mousePressEvent(self, event):
        self.setFocus()
        handlers.on_pointer_down(self, from_qpoint(event.position()), event.button())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        handlers.on_pointer_move(self, from_qpoint(event.position()))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        handlers.on_pointer_up(self, from_qpoint(event.position()))
        super().mouseReleaseEvent(event)

    def enterEvent(self, event):
        self.setFocus()
        super().enterEvent(event)

    def wheelEvent(self, event):
        # 휠 델타: 일부 환경에서 y가 0이 되는 문제를 x로 폴백
        dy = event.angleDelta().y() or event.angleDelta().x()
        if handlers.on_pointer_wheel(self, from_qpoint(event.position()), dy):
            event.accept()
            return
        super().wheelEvent(event)

    def dragEnterEvent(self, event):
        handlers.drag_enter(self, event)

    def dragMoveEvent(self, event):
        handlers.drag_enter(self, event)

    def dropEvent(self, event):
        handlers.drop(self, event)
