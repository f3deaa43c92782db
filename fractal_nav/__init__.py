"""Top-level public API for the ``fractal_nav`` package.

This module re-exports the notebook-facing surface so users can import from a
single namespace, for example:

>>> from fractal_nav import FractalViewer, ViewerConfig  # doctest: +SKIP

It exposes both the ready-made viewer widget and the building blocks
(pure view arithmetic, the render client, the controller) for custom hosts.
"""

from .InputConvert import InputConvert
from .config import ViewerConfig
from .display import DisplaySurface, OneShotOutput, WidgetSurface
from .image_handle import ImageHandle
from .render_client import RenderClient, RenderError
from .view import (
    DEFAULT_VIEW,
    Direction,
    InvalidDirectionError,
    View,
    ZoomDirection,
    format_coordinate,
    move_view,
    parse_direction,
    parse_zoom,
    zoom_view,
)
from .viewer import FractalViewer
from .viewport_controller import ViewportController

__all__ = [
    "DEFAULT_VIEW",
    "Direction",
    "DisplaySurface",
    "FractalViewer",
    "ImageHandle",
    "InputConvert",
    "InvalidDirectionError",
    "OneShotOutput",
    "RenderClient",
    "RenderError",
    "View",
    "ViewerConfig",
    "ViewportController",
    "WidgetSurface",
    "ZoomDirection",
    "format_coordinate",
    "move_view",
    "parse_direction",
    "parse_zoom",
    "zoom_view",
]
