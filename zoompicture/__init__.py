# Public API re-exports
# ui
from .ui.zoom_picture import ZoomPicture  # noqa: F401
from .ui.main_window import ZoomPictureWindow  # noqa: F401
from .ui.state import (  # noqa: F401
    AnchorMode as AnchorMode,
    LayoutMode as LayoutMode,
    Point as Point,
    Rect as Rect,
    Size as Size,
    ViewportState as ViewportState,
    ZoomLimits as ZoomLimits,
    DragSession as DragSession,
)
# services
from .services.image_service import ImageService  # noqa: F401
from .services.viewport_engine import InvalidImageError  # noqa: F401
# storage
from .storage.settings_store import ViewportConfig, load_config, save_config  # noqa: F401
# utils
from .utils.logging_setup import setup_logging, shutdown_logging, get_logger  # noqa: F401
# dnd
from .dnd.dnd_handlers import handle_dropped_files, urls_to_local_files  # noqa: F401

__version__ = "0.1.0"
