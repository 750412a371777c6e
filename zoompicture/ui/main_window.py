import os
from PyQt6.QtWidgets import QMainWindow, QScrollArea, QLabel  # type: ignore[import]
from PyQt6.QtCore import Qt, QSettings  # type: ignore[import]
from PyQt6.QtGui import QAction, QActionGroup, QKeySequence  # type: ignore[import]

from .state import AnchorMode, LayoutMode
from .zoom_picture import ZoomPicture
from ..storage.settings_store import create_settings, load_config, save_config
from ..utils.file_utils import open_file_dialog_util
from ..utils.logging_setup import get_logger

APP_TITLE = "ZoomPicture"
ZOOM_STEP = 1.25


class ZoomPictureWindow(QMainWindow):
    def __init__(self, settings: QSettings | None = None):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.log = get_logger("ui.ZoomPictureWindow")

        self.settings = settings if settings is not None else create_settings()
        self.current_image_path = None
        self.last_open_dir = str(self.settings.value("recent/last_open_dir", "", str) or "")

        self.picture = ZoomPicture(config=load_config(self.settings))
        self.picture.zoomChanged.connect(self.on_zoom_changed)
        self.picture.imageLoadFailed.connect(self.on_image_load_failed)

        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.scroll_area.setWidget(self.picture)
        self.setCentralWidget(self.scroll_area)

        self.status_label = QLabel("")
        self.statusBar().addPermanentWidget(self.status_label)

        self._build_menus()
        self.resize(1024, 768)

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file)
        file_menu.addAction(open_action)
        close_action = QAction("&Close image", self)
        close_action.triggered.connect(self.close_image)
        file_menu.addAction(close_action)

        view_menu = self.menuBar().addMenu("&View")
        zoom_in = QAction("Zoom &in", self)
        zoom_in.setShortcut(QKeySequence.StandardKey.ZoomIn)
        zoom_in.triggered.connect(lambda: self.zoom_by(ZOOM_STEP))
        view_menu.addAction(zoom_in)
        zoom_out = QAction("Zoom &out", self)
        zoom_out.setShortcut(QKeySequence.StandardKey.ZoomOut)
        zoom_out.triggered.connect(lambda: self.zoom_by(1.0 / ZOOM_STEP))
        view_menu.addAction(zoom_out)
        view_menu.addSeparator()

        self.layout_actions = {}
        layout_group = QActionGroup(self)
        for mode, label in ((LayoutMode.SCROLLABLE, "&Scrollable"), (LayoutMode.RATIO_STRETCH, "&Ratio stretch")):
            act = QAction(label, self)
            act.setCheckable(True)
            act.setChecked(self.picture.layoutMode() is mode)
            act.triggered.connect(lambda _=False, m=mode: self.set_layout_mode(m))
            layout_group.addAction(act)
            view_menu.addAction(act)
            self.layout_actions[mode] = act
        view_menu.addSeparator()

        anchor_menu = view_menu.addMenu("Zoom &anchor")
        anchor_group = QActionGroup(self)
        for mode, label in (
            (AnchorMode.MOUSE_POSITION, "Mouse position"),
            (AnchorMode.CONTROL_CENTER, "Control center"),
            (AnchorMode.IMAGE_CENTER, "Image center"),
        ):
            act = QAction(label, self)
            act.setCheckable(True)
            act.setChecked(self.picture.anchorMode() is mode)
            act.triggered.connect(lambda _=False, m=mode: self.picture.setAnchorMode(m))
            anchor_group.addAction(act)
            anchor_menu.addAction(act)

    # ----- 명령 -----
    def open_file(self) -> None:
        path = open_file_dialog_util(self, self.last_open_dir)
        if path:
            self.load_image(path)

    def load_image(self, path: str) -> bool:
        if not self.picture.loadImage(path):
            return False
        self.current_image_path = path
        self.last_open_dir = os.path.dirname(path)
        self._relayout()
        self.update_window_title(path)
        return True

    def close_image(self) -> None:
        self.picture.setImage(None)
        self.current_image_path = None
        self.update_window_title()
        self.status_label.setText("")

    def zoom_by(self, factor: float) -> None:
        self.picture.setZoomFactor(self.picture.zoomFactor() * factor)

    def set_layout_mode(self, mode: LayoutMode) -> None:
        self.log.info("layout_mode | mode=%s", mode.name)
        self.picture.setLayoutMode(mode)
        self._relayout()

    def _relayout(self) -> None:
        if self.picture.layoutMode() is LayoutMode.RATIO_STRETCH:
            # 비율 맞춤: 스크롤 영역의 가용 크기 안에서 비율 유지
            vp = self.scroll_area.viewport().size()
            self.picture.resize(vp)
        self.picture.applyLayout()

    def update_window_title(self, file_path=None) -> None:
        if file_path:
            self.setWindowTitle(f"{os.path.basename(file_path)} - {APP_TITLE}")
        else:
            self.setWindowTitle(APP_TITLE)

    # ----- 시그널 -----
    def on_zoom_changed(self, zoom: float) -> None:
        self.status_label.setText(f"{zoom * 100.0:.0f}%")

    def on_image_load_failed(self, path: str, error: str) -> None:
        name = os.path.basename(path) if path else ""
        self.log.error("image_open_fail | file=%s | err=%s", name, error)
        self.statusBar().showMessage(f"Failed to load image {name}: {error}", 5000)

    # ----- Events -----
    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self.picture.layoutMode() is LayoutMode.RATIO_STRETCH:
            self._relayout()

    def closeEvent(self, event):
        self.log.info("window_close")
        save_config(self.settings, self.picture.config())
        self.settings.setValue("recent/last_open_dir", self.last_open_dir)
        super().closeEvent(event)
