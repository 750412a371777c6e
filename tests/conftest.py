import os

# 헤드리스 환경(CI)에서도 위젯 테스트가 돌도록 기본 플랫폼 지정
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PyQt6.QtGui import QColor, QImage  # noqa: E402
from PyQt6.QtCore import QSettings  # noqa: E402


def make_qimage(w: int, h: int, color: str = "#ff0000") -> QImage:
    img = QImage(w, h, QImage.Format.Format_RGB32)
    img.fill(QColor(color))
    return img


@pytest.fixture
def png_path(tmp_path):
    path = tmp_path / "sample.png"
    assert make_qimage(800, 600).save(str(path), "PNG")
    return str(path)


@pytest.fixture
def ini_settings(tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
