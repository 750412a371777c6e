import os
from PyQt6.QtWidgets import QFileDialog  # type: ignore[import]

from .logging_setup import get_logger
log = get_logger("utils.file")

SUPPORTED_FORMATS = [".jpeg", ".jpg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp"]


def is_supported_image(path: str) -> bool:
    if not path:
        return False
    ext = os.path.splitext(path.lower())[1]
    return ext in SUPPORTED_FORMATS


def open_file_dialog_util(parent_widget, initial_dir=None):
    file_filter = f"Images ({' '.join(['*' + ext for ext in SUPPORTED_FORMATS])})"
    start_dir = initial_dir if (initial_dir and os.path.isdir(initial_dir)) else ""
    file_path, _ = QFileDialog.getOpenFileName(parent_widget, "Open image", start_dir, file_filter)
    if not file_path:
        log.info("open_dialog_empty_selection")
    return file_path
