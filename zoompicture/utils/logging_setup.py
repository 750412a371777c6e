import os
import sys
import uuid
import logging
import logging.handlers
import queue
from typing import Optional

_SESSION_ID = uuid.uuid4().hex[:8]
_listener: logging.handlers.QueueListener | None = None

ENV_LOG_LEVEL = "ZOOMPICTURE_LOG_LEVEL"


class _SessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if not hasattr(record, "session_id"):
            record.session_id = _SESSION_ID
        return True


def _default_log_dir() -> str:
    try:
        if sys.platform == "win32":
            base = os.getenv("LOCALAPPDATA") or os.path.expanduser("~\\AppData\\Local")
        else:
            base = os.getenv("XDG_STATE_HOME") or os.path.expanduser("~/.local/state")
        path = os.path.join(base, "ZoomPicture", "logs")
        os.makedirs(path, exist_ok=True)
        return path
    except OSError:
        return os.getcwd()


def resolve_level(level: Optional[str] = None) -> str:
    """명시 레벨 > 환경변수 > INFO 순으로 결정."""
    if level:
        return str(level).upper()
    env = os.getenv(ENV_LOG_LEVEL)
    if env and env.strip():
        return env.strip().upper()
    return "INFO"


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Initialize app-wide logging with rotating file handler and queue listener."""
    global _listener
    lvl_name = resolve_level(level)
    if logging.getLogger().handlers:
        set_level(lvl_name)
        return

    lvl = getattr(logging, lvl_name, logging.INFO)
    q: "queue.Queue[logging.LogRecord]" = queue.Queue(maxsize=10000)
    qh = logging.handlers.QueueHandler(q)
    qh.addFilter(_SessionFilter())

    root = logging.getLogger()
    root.setLevel(lvl)
    root.addHandler(qh)

    log_dir = log_dir or _default_log_dir()
    log_path = os.path.join(log_dir, "app.log")

    fh = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5 * 1024 * 1024, backupCount=10, encoding="utf-8"
    )
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | sid=%(session_id)s | %(message)s")
    fh.setFormatter(fmt)

    sh = logging.StreamHandler(stream=sys.stderr)
    sh.setLevel(lvl)
    sh.setFormatter(fmt)

    _listener = logging.handlers.QueueListener(q, fh, sh, respect_handler_level=True)
    _listener.start()


def shutdown_logging() -> None:
    global _listener
    if _listener:
        _listener.stop()
        _listener = None


def set_level(level: str) -> None:
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logging.getLogger().setLevel(lvl)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_session_id() -> str:
    return _SESSION_ID
