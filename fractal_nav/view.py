"""View value object and pure navigation arithmetic.

Purpose
-------
This module defines ``View``, the immutable triple ``(x, y, w)`` that
identifies the visible region of the fractal plane, together with the pure
functions that compute the next view for pan and zoom actions.

Nothing here touches widgets or the network. ``ViewportController`` reads a
``View`` from the display fields, asks this module for the next one, and
pushes the result back.

Notes
-----
``w`` is the window length (half-width of the visible region). The functions
assume ``w > 0`` but do not enforce it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Union

PAN_FRACTION = 0.25
ZOOM_IN_FACTOR = 0.75
ZOOM_OUT_FACTOR = 1.25


class InvalidDirectionError(ValueError):
    """Raised when a pan or zoom token is not a recognised direction."""


class Direction(str, Enum):
    """Pan directions accepted by :func:`move_view`."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class ZoomDirection(str, Enum):
    """Zoom directions accepted by :func:`zoom_view`."""

    IN = "in"
    OUT = "out"


DirectionLike = Union[Direction, str]
ZoomDirectionLike = Union[ZoomDirection, str]


@dataclass(frozen=True)
class View:
    """Center coordinate and window length of the visible region.

    Parameters
    ----------
    x : float
        Real coordinate of the window center.
    y : float
        Imaginary coordinate of the window center.
    w : float
        Window length, used as the linear scale for pan steps.
    """

    x: float
    y: float
    w: float

    def as_fields(self) -> Dict[str, str]:
        """Return the text each display field shows for this view."""
        return {
            "x": format_coordinate(self.x),
            "y": format_coordinate(self.y),
            "w": format_coordinate(self.w),
        }

    def payload(self) -> Dict[str, str]:
        """Return the form payload sent with a render request."""
        return self.as_fields()


DEFAULT_VIEW = View(x=-0.5, y=0.0, w=3.0)


def format_coordinate(value: float) -> str:
    """Format ``value`` the way a browser numeric input displays it.

    >>> format_coordinate(3.0)
    '3'
    >>> format_coordinate(-0.5)
    '-0.5'
    >>> format_coordinate(float("nan"))
    'NaN'
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def parse_direction(token: DirectionLike) -> Direction:
    """Return the :class:`Direction` named by ``token``.

    Raises
    ------
    InvalidDirectionError
        If ``token`` is not one of ``left``, ``right``, ``up``, ``down``.
    """
    if isinstance(token, Direction):
        return token
    if isinstance(token, str):
        try:
            return Direction(token)
        except ValueError:
            pass
    raise InvalidDirectionError(
        f"Unknown pan direction {token!r}; expected one of "
        f"{[d.value for d in Direction]}."
    )


def parse_zoom(token: ZoomDirectionLike) -> ZoomDirection:
    """Return the :class:`ZoomDirection` named by ``token``.

    Raises
    ------
    InvalidDirectionError
        If ``token`` is neither ``in`` nor ``out``.
    """
    if isinstance(token, ZoomDirection):
        return token
    if isinstance(token, str):
        try:
            return ZoomDirection(token)
        except ValueError:
            pass
    raise InvalidDirectionError(
        f"Unknown zoom direction {token!r}; expected one of "
        f"{[d.value for d in ZoomDirection]}."
    )


def move_view(
    view: View, direction: DirectionLike, *, pan_fraction: float = PAN_FRACTION
) -> View:
    """Return ``view`` panned one step in ``direction``.

    The step is ``view.w * pan_fraction``. Exactly one axis moves; ``w`` is
    unchanged. ``down`` increases ``y`` and ``up`` decreases it, matching the
    image row order of the rendering service.

    Examples
    --------
    >>> move_view(View(0.0, 0.0, 4.0), "left")
    View(x=-1.0, y=0.0, w=4.0)
    """
    direction = parse_direction(direction)
    step = view.w * pan_fraction

    if direction is Direction.LEFT:
        return replace(view, x=view.x - step)
    if direction is Direction.RIGHT:
        return replace(view, x=view.x + step)
    if direction is Direction.DOWN:
        return replace(view, y=view.y + step)
    return replace(view, y=view.y - step)


def zoom_view(
    view: View,
    direction: ZoomDirectionLike,
    *,
    zoom_in: float = ZOOM_IN_FACTOR,
    zoom_out: float = ZOOM_OUT_FACTOR,
) -> View:
    """Return ``view`` with its window length scaled for ``direction``.

    ``in`` shrinks the window (``w * zoom_in``), ``out`` grows it
    (``w * zoom_out``). The center is unchanged. The two factors are not
    reciprocal, so zooming in and back out lands on ``w * 0.9375`` with the
    defaults.
    """
    direction = parse_zoom(direction)
    factor = zoom_in if direction is ZoomDirection.IN else zoom_out
    return replace(view, w=view.w * factor)
