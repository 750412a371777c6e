from __future__ import annotations

import math
from dataclasses import dataclass, fields

from PyQt6.QtCore import QSettings  # type: ignore[import]

from ..ui.state import AnchorMode, LayoutMode, ZoomLimits
from ..utils.logging_setup import get_logger

_log = get_logger("storage.settings")

ORGANIZATION = "ZoomPicture"
APPLICATION = "ZoomPicture"


@dataclass
class ViewportConfig:
    enable_dragging: bool = True
    enable_wheel_zoom: bool = True
    maximum_zoom_factor: float = 64.0
    minimum_image_width: int = 10
    minimum_image_height: int = 10
    wheel_divisor: int = 4000
    anchor_mode: AnchorMode = AnchorMode.MOUSE_POSITION
    layout_mode: LayoutMode = LayoutMode.SCROLLABLE

    def zoom_limits(self) -> ZoomLimits:
        return ZoomLimits(
            minimum_image_width=int(self.minimum_image_width),
            minimum_image_height=int(self.minimum_image_height),
            maximum_zoom_factor=float(self.maximum_zoom_factor),
        )


def create_settings() -> QSettings:
    return QSettings(ORGANIZATION, APPLICATION)


def _read_bool(settings: QSettings, key: str, default: bool) -> bool:
    try:
        return bool(settings.value(key, default, bool))
    except (TypeError, ValueError):
        _log.warning("settings_invalid | key=%s | fallback=%s", key, default)
        return default


def _read_positive(settings: QSettings, key: str, default, cast):
    try:
        value = cast(settings.value(key, default))
    except (TypeError, ValueError):
        value = None
    # nan/inf는 비교를 통과하므로 별도로 거른다
    if value is None or not math.isfinite(value) or value <= 0:
        _log.warning("settings_invalid | key=%s | fallback=%s", key, default)
        return default
    return value


def _read_enum(settings: QSettings, key: str, enum_cls, default):
    raw = str(settings.value(key, default.name, str) or "")
    try:
        return enum_cls[raw.upper()]
    except KeyError:
        _log.warning("settings_invalid | key=%s | value=%s | fallback=%s", key, raw, default.name)
        return default


def load_config(settings: QSettings) -> ViewportConfig:
    d = ViewportConfig()
    cfg = ViewportConfig(
        enable_dragging=_read_bool(settings, "view/enable_dragging", d.enable_dragging),
        enable_wheel_zoom=_read_bool(settings, "view/enable_wheel_zoom", d.enable_wheel_zoom),
        maximum_zoom_factor=_read_positive(settings, "view/maximum_zoom_factor", d.maximum_zoom_factor, float),
        minimum_image_width=_read_positive(settings, "view/minimum_image_width", d.minimum_image_width, int),
        minimum_image_height=_read_positive(settings, "view/minimum_image_height", d.minimum_image_height, int),
        wheel_divisor=_read_positive(settings, "view/wheel_divisor", d.wheel_divisor, int),
        anchor_mode=_read_enum(settings, "view/anchor_mode", AnchorMode, d.anchor_mode),
        layout_mode=_read_enum(settings, "view/layout_mode", LayoutMode, d.layout_mode),
    )
    _log.debug("settings_loaded | %s", ", ".join(f"{f.name}={getattr(cfg, f.name)}" for f in fields(cfg)))
    return cfg


def save_config(settings: QSettings, config: ViewportConfig) -> None:
    settings.setValue("view/enable_dragging", bool(config.enable_dragging))
    settings.setValue("view/enable_wheel_zoom", bool(config.enable_wheel_zoom))
    settings.setValue("view/maximum_zoom_factor", float(config.maximum_zoom_factor))
    settings.setValue("view/minimum_image_width", int(config.minimum_image_width))
    settings.setValue("view/minimum_image_height", int(config.minimum_image_height))
    settings.setValue("view/wheel_divisor", int(config.wheel_divisor))
    settings.setValue("view/anchor_mode", config.anchor_mode.name)
    settings.setValue("view/layout_mode", config.layout_mode.name)
    settings.sync()
