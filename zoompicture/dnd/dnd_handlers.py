import os
from PyQt6.QtCore import QUrl

from ..utils.file_utils import is_supported_image
from ..utils.logging_setup import get_logger

_log = get_logger("ui.dnd")


def handle_dropped_files(widget, files: list[str]) -> bool:
    # 드롭 순서 유지 + 중복 제거 + 확장자 필터
    seen = set()
    clean_files = []
    for p in files:
        if (p not in seen) and is_supported_image(p):
            seen.add(p)
            clean_files.append(p)
    if not clean_files:
        _log.info("dnd_drop_rejected | reason=no_supported_images | n=%d", len(files or []))
        first = files[0] if files else ""
        widget.imageLoadFailed.emit(first, "no supported image files")
        return False
    _log.info("dnd_drop_accept | n=%d | first=%s", len(clean_files), os.path.basename(clean_files[0]))
    # 단일 이미지 위젯: 첫 파일만 연다
    return widget.loadImage(clean_files[0])


def urls_to_local_files(urls) -> list[str]:
    if not urls:
        return []
    paths = []
    for u in urls:
        if isinstance(u, QUrl) and u.isLocalFile():
            paths.append(u.toLocalFile())
    return [p for p in paths if os.path.isfile(p)]
