import os
from typing import Tuple

from PyQt6.QtCore import QObject, pyqtSignal  # type: ignore[import]
from PyQt6.QtGui import QImage, QImageReader  # type: ignore[import]

from ..utils.logging_setup import get_logger

_log = get_logger("services.image")


class ImageService(QObject):
    loaded = pyqtSignal(str, QImage, bool, str)  # path, img, success, error

    def __init__(self, parent=None):
        super().__init__(parent)

    def load(self, path: str) -> Tuple[str, QImage | None, bool, str]:
        if not path or not os.path.isfile(path):
            err = "file not found"
            _log.error("image_load_fail | file=%s | err=%s", os.path.basename(path or ""), err)
            self.loaded.emit(path or "", QImage(), False, err)
            return path, None, False, err
        img, ok, err = _read_qimage_with_exif_auto_transform(path)
        if not ok:
            # Qt 플러그인이 없는 포맷은 Pillow로 한 번 더 시도
            img, ok, err2 = _read_qimage_with_pillow(path)
            if not ok:
                err = err2 or err
        if not ok:
            _log.error("image_load_fail | file=%s | err=%s", os.path.basename(path), err)
            self.loaded.emit(path, QImage(), False, err)
            return path, None, False, err
        _log.info("image_load_ok | file=%s | w=%d | h=%d", os.path.basename(path), img.width(), img.height())
        self.loaded.emit(path, img, True, "")
        return path, img, True, ""


def _read_qimage_with_exif_auto_transform(path: str) -> tuple[QImage, bool, str]:
    reader = QImageReader(path)
    # EXIF Orientation 등 자동 변환 활성화
    reader.setAutoTransform(True)
    img = reader.read()
    if img.isNull():
        return QImage(), False, reader.errorString() or "cannot read image"
    return img, True, ""


def _read_qimage_with_pillow(path: str) -> tuple[QImage, bool, str]:
    from PIL import Image as PILImage, ImageOps, UnidentifiedImageError  # type: ignore

    try:
        with PILImage.open(path) as src:
            pil_image = ImageOps.exif_transpose(src).convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        return QImage(), False, str(e)
    width, height = pil_image.size
    raw = pil_image.tobytes("raw", "RGBA")
    # 버퍼 수명 문제를 피하기 위해 copy()로 소유권 분리
    img = QImage(raw, width, height, width * 4, QImage.Format.Format_RGBA8888).copy()
    if img.isNull():
        return QImage(), False, "cannot convert decoded image"
    return img, True, ""
