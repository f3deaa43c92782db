"""Viewport controller: pan, zoom, reset and render orchestration.

Purpose
-------
``ViewportController`` owns the navigation logic of the viewer. Each action
reads the current view from the display fields, computes the next ``View``
with the pure helpers in :mod:`fractal_nav.view`, writes the result back to
the fields, and then issues a render request for it.

Concurrency
-----------
Render requests run on an executor so the UI never blocks. Completion is
handed back to the asyncio loop that was running when the request was issued
(the Jupyter kernel loop); without a running loop it is applied directly on
the completing thread under the controller lock.

Every request carries a generation number. Only the response to the latest
issued request may replace the displayed image; older responses are dropped
and their image handles released. Request outcomes never touch the fields.

Important gotchas
-----------------
- Invalid direction tokens raise :class:`~fractal_nav.view.InvalidDirectionError`
  before anything changes.
- Non-numeric field text is not rejected: it becomes ``nan`` and flows into
  the view and the request payload.
- Render failures are logged and kept in :attr:`ViewportController.last_error`;
  they never propagate to the caller of ``move``/``zoom``/``reset``.
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Optional

from .InputConvert import InputConvert
from .config import ViewerConfig
from .display import FIELD_NAMES, DisplaySurface
from .image_handle import ImageHandle
from .view import (
    DirectionLike,
    View,
    ZoomDirectionLike,
    move_view,
    parse_direction,
    parse_zoom,
    zoom_view,
)

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Renderer = Callable[[View], ImageHandle]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class ViewportController:
    """Compute view changes and keep the displayed image in step with them.

    Parameters
    ----------
    surface : DisplaySurface
        Fields and image element to drive.
    renderer : callable
        ``renderer(view) -> ImageHandle``; raises on failure. Usually a
        :class:`~fractal_nav.render_client.RenderClient`.
    config : ViewerConfig, optional
        Navigation factors, default view and alt text.
    executor : concurrent.futures.Executor, optional
        Where render requests run. When omitted the controller creates a
        thread pool and shuts it down in :meth:`close`.

    Notes
    -----
    Construction writes ``config.default_view`` to the fields but issues no
    request; call :meth:`render` (or :meth:`reset`) for the first image.
    """

    def __init__(
        self,
        surface: DisplaySurface,
        renderer: Renderer,
        *,
        config: Optional[ViewerConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._surface = surface
        self._renderer = renderer
        self._config = config if config is not None else ViewerConfig()
        self._owns_executor = executor is None
        self._executor: Executor = (
            executor
            if executor is not None
            else ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix="fractal-render",
            )
        )
        self._lock = threading.RLock()
        self._generation = 0
        self._displayed_generation = 0
        self._last_error: Optional[BaseException] = None
        self._closed = False

        self._push(self._config.default_view, FIELD_NAMES)

    # -----------------------------
    # Read-only state
    # -----------------------------

    @property
    def config(self) -> ViewerConfig:
        """Return the navigation factors, default view and alt text in use."""
        return self._config

    @property
    def surface(self) -> DisplaySurface:
        """Return the surface whose fields and image this controller drives."""
        return self._surface

    @property
    def view(self) -> View:
        """Return the view the fields currently hold."""
        return self._read_view()

    @property
    def generation(self) -> int:
        """Return the number of the most recently issued render request."""
        return self._generation

    @property
    def displayed_generation(self) -> int:
        """Return the request number whose image is on screen (0 if none)."""
        return self._displayed_generation

    @property
    def last_error(self) -> Optional[BaseException]:
        """Return the failure of the latest issued request, if it failed.

        Failures of superseded requests are logged but not recorded here. The
        value is cleared when an image is shown.
        """
        return self._last_error

    # -----------------------------
    # User-triggered actions
    # -----------------------------

    def move(self, direction: DirectionLike) -> None:
        """Pan one step (a quarter of the window length) in ``direction``."""
        direction = parse_direction(direction)
        new_view = move_view(
            self._read_view(), direction, pan_fraction=self._config.pan_fraction
        )
        self._push(new_view, ("x", "y"))
        self.render()

    def zoom(self, direction: ZoomDirectionLike) -> None:
        """Shrink (``in``) or grow (``out``) the window length."""
        direction = parse_zoom(direction)
        new_view = zoom_view(
            self._read_view(),
            direction,
            zoom_in=self._config.zoom_in_factor,
            zoom_out=self._config.zoom_out_factor,
        )
        self._push(new_view, ("w",))
        self.render()

    def reset(self) -> None:
        """Restore the default view and render it."""
        self._push(self._config.default_view, FIELD_NAMES)
        self.render()

    # -----------------------------
    # Rendering
    # -----------------------------

    def render(self) -> int:
        """Issue a render request for the view currently in the fields.

        Returns
        -------
        int
            Generation number of the issued request.

        Raises
        ------
        RuntimeError
            If the controller has been closed.
        """
        view = self._read_view()
        with self._lock:
            if self._closed:
                raise RuntimeError("ViewportController is closed.")
            self._generation += 1
            generation = self._generation

        loop = _running_loop()
        logger.debug("Render #%d requested for %s", generation, view)
        future = self._executor.submit(self._renderer, view)
        future.add_done_callback(
            lambda f: self._deliver(generation, view, f, loop)
        )
        return generation

    def _deliver(
        self,
        generation: int,
        view: View,
        future: Future,
        loop: Optional[asyncio.AbstractEventLoop],
    ) -> None:
        if loop is not None and not loop.is_closed():
            try:
                loop.call_soon_threadsafe(self._complete, generation, view, future)
                return
            except RuntimeError:
                logger.debug("Event loop closed; completing render #%d inline", generation)
        self._complete(generation, view, future)

    def _complete(self, generation: int, view: View, future: Future) -> None:
        with self._lock:
            if future.cancelled():
                logger.debug("Render #%d was cancelled", generation)
                return

            error = future.exception()
            if error is not None:
                if generation == self._generation:
                    self._last_error = error
                logger.error(
                    "Render #%d for %s failed: %s",
                    generation,
                    view,
                    error,
                    exc_info=(type(error), error, error.__traceback__),
                )
                return

            handle: ImageHandle = future.result()
            if self._closed or generation != self._generation:
                logger.debug(
                    "Discarding stale render #%d (latest is #%d)",
                    generation,
                    self._generation,
                )
                handle.release()
                return

            self._surface.show_image(handle, self._config.alt_text)
            self._displayed_generation = generation
            self._last_error = None

    # -----------------------------
    # Field synchronization
    # -----------------------------

    def _read_field(self, name: str) -> float:
        text = self._surface.get_field(name)
        try:
            return InputConvert(text)
        except ValueError:
            logger.warning("Field %r holds non-numeric text %r; using nan", name, text)
            return math.nan

    def _read_view(self) -> View:
        values: Dict[str, float] = {name: self._read_field(name) for name in FIELD_NAMES}
        return View(**values)

    def _push(self, view: View, names: Iterable[str]) -> None:
        text = view.as_fields()
        for name in names:
            self._surface.set_field(name, text[name])

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def close(self) -> None:
        """Stop accepting renders, release the displayed image, free the pool."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=False)
        self._surface.clear_image()

    def __enter__(self) -> "ViewportController":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
