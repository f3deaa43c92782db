"""Viewer configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Tuple, Union

from .view import DEFAULT_VIEW, PAN_FRACTION, ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR, View

TimeoutLike = Union[None, float, Tuple[float, float]]


@dataclass(frozen=True)
class ViewerConfig:
    """Configuration knobs for :class:`~fractal_nav.viewer.FractalViewer`.

    Parameters
    ----------
    endpoint : str
        URL of the render endpoint. Receives a form-encoded ``POST`` with
        ``x``, ``y`` and ``w``.
    default_view : View
        View installed on construction and by ``reset()``.
    pan_fraction : float
        Fraction of the window length moved by one pan step.
    zoom_in_factor, zoom_out_factor : float
        Window-length multipliers for zooming in and out.
    timeout : float, tuple or None
        Passed to ``requests`` as-is. ``None`` waits indefinitely.
    alt_text : str
        Accessible description set on the image after each successful render.
    max_workers : int
        Size of the thread pool that runs render requests.
    """

    endpoint: str = "http://localhost:8000/api/render"
    default_view: View = DEFAULT_VIEW
    pan_fraction: float = PAN_FRACTION
    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR
    timeout: TimeoutLike = None
    alt_text: str = "Render of the mandelbrot set"
    max_workers: int = 2

    def __post_init__(self) -> None:
        """Validate option values."""
        if not str(self.endpoint).strip():
            raise ValueError("endpoint must be a non-empty URL")
        for name in ("pan_fraction", "zoom_in_factor", "zoom_out_factor"):
            if not float(getattr(self, name)) > 0:
                raise ValueError(f"{name} must be > 0")
        if int(self.max_workers) < 1:
            raise ValueError("max_workers must be >= 1")
        if not isinstance(self.default_view, View):
            raise ValueError("default_view must be a View")

    def replace(self, **changes: Any) -> "ViewerConfig":
        """Return a copy with ``changes`` applied (and validated)."""
        return replace(self, **changes)

