import sys
import os
from PyQt6.QtWidgets import QApplication  # type: ignore[import]

from .ui.main_window import ZoomPictureWindow
from .utils.logging_setup import setup_logging, shutdown_logging


def main(argv=None) -> int:
    argv = list(sys.argv if argv is None else argv)
    setup_logging()
    app = QApplication.instance() or QApplication(argv)
    # 명령줄 인자: 열 수 있는 첫 번째 이미지 파일만 연다
    args = [a for a in argv[1:] if a and not a.startswith('-')]
    window = ZoomPictureWindow()
    window.show()
    for arg in args:
        path = os.path.abspath(os.path.expanduser(arg))
        if os.path.isfile(path) and window.load_image(path):
            break
    try:
        return app.exec()
    finally:
        shutdown_logging()
