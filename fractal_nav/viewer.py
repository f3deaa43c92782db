"""Interactive fractal viewer for notebooks.

Purpose
-------
``FractalViewer`` is the composition root: it builds the widget surface, the
HTTP render client and the viewport controller from one ``ViewerConfig``,
and wires the navigation buttons to the controller actions.

Concepts and structure
----------------------
- ``WidgetSurface`` owns the widget tree (fields, image, buttons).
- ``RenderClient`` talks to the rendering service.
- ``ViewportController`` owns navigation and the render lifecycle.

Examples
--------
>>> from fractal_nav import FractalViewer, ViewerConfig
>>> viewer = FractalViewer(ViewerConfig(endpoint="http://localhost:8000/api/render"))  # doctest: +SKIP
>>> viewer  # first display renders the default view  # doctest: +SKIP
>>> viewer.zoom("in")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Any, Optional

import ipywidgets as widgets
from IPython.display import display

from .config import ViewerConfig
from .display import WidgetSurface
from .render_client import RenderClient
from .view import View
from .viewport_controller import Renderer, ViewportController

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FractalViewer:
    """Notebook widget that navigates a remotely rendered fractal.

    Parameters
    ----------
    config : ViewerConfig, optional
        Endpoint, navigation factors and defaults.
    renderer : callable, optional
        Replaces the HTTP client (``renderer(view) -> ImageHandle``).
    executor : concurrent.futures.Executor, optional
        Forwarded to :class:`ViewportController`.
    display : bool, optional
        Display immediately (and issue the initial render).

    Notes
    -----
    Construction issues no request. The first display renders the view the
    fields hold, like a page load.
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        *,
        renderer: Optional[Renderer] = None,
        executor: Optional[Executor] = None,
        display: bool = False,
    ) -> None:
        self._config = config if config is not None else ViewerConfig()
        self._has_been_displayed = False

        self._surface = WidgetSurface()
        self._client: Optional[RenderClient] = None
        if renderer is None:
            self._client = RenderClient(self._config.endpoint, timeout=self._config.timeout)
            renderer = self._client
        self._controller = ViewportController(
            self._surface, renderer, config=self._config, executor=executor
        )
        self._wire_buttons()

        if display:
            self._ipython_display_()

    def _wire_buttons(self) -> None:
        s = self._surface
        s.left_button.on_click(lambda _b: self.move("left"))
        s.right_button.on_click(lambda _b: self.move("right"))
        s.up_button.on_click(lambda _b: self.move("up"))
        s.down_button.on_click(lambda _b: self.move("down"))
        s.zoom_in_button.on_click(lambda _b: self.zoom("in"))
        s.zoom_out_button.on_click(lambda _b: self.zoom("out"))
        s.reset_button.on_click(lambda _b: self.reset())

    @property
    def config(self) -> ViewerConfig:
        """Return the configuration this viewer was built from.

        Returns
        -------
        ViewerConfig
            The frozen configuration (endpoint, factors, default view).
        """
        return self._config

    @property
    def surface(self) -> WidgetSurface:
        """Return the widget surface holding the fields, image and buttons.

        Returns
        -------
        WidgetSurface
            The surface the controller reads from and writes to.
        """
        return self._surface

    @property
    def controller(self) -> ViewportController:
        """Return the controller that owns navigation and rendering."""
        return self._controller

    @property
    def widget(self) -> widgets.VBox:
        """Return the root widget for embedding in custom layouts."""
        return self._surface.widget

    @property
    def view(self) -> View:
        """Return the view the fields currently hold.

        Returns
        -------
        View
            Parsed from the field text; unparseable fields read as ``nan``.
        """
        return self._controller.view

    def move(self, direction: str) -> None:
        """Pan one step in ``direction`` and render the new view.

        Parameters
        ----------
        direction : {"left", "right", "up", "down"}
            Pan direction; matched exactly.

        Returns
        -------
        None

        Raises
        ------
        InvalidDirectionError
            For any other token; nothing changes and no request is issued.

        Examples
        --------
        >>> viewer.move("left")  # doctest: +SKIP
        """
        self._controller.move(direction)

    def zoom(self, direction: str) -> None:
        """Zoom ``"in"`` (``w * 0.75``) or ``"out"`` (``w * 1.25``) and render.

        Parameters
        ----------
        direction : {"in", "out"}
            Zoom direction; matched exactly.

        Returns
        -------
        None

        Raises
        ------
        InvalidDirectionError
            For any other token; nothing changes and no request is issued.

        Examples
        --------
        >>> viewer.zoom("in")  # doctest: +SKIP
        """
        self._controller.zoom(direction)

    def reset(self) -> None:
        """Restore the configured default view and render it.

        Returns
        -------
        None

        Examples
        --------
        >>> viewer.reset()  # doctest: +SKIP
        >>> viewer.view  # doctest: +SKIP
        View(x=-0.5, y=0.0, w=3.0)
        """
        self._controller.reset()

    def render(self) -> int:
        """Request a fresh image for the view in the fields.

        Returns
        -------
        int
            Generation number of the issued request.
        """
        return self._controller.render()

    def _ipython_display_(self, **kwargs: Any) -> None:
        """
        Special method called by IPython to display the object.

        The first display also issues the initial render.
        """
        first = not self._has_been_displayed
        self._has_been_displayed = True
        display(self._surface.output_widget)
        if first:
            logger.debug("Initial render for %s", self._controller.view)
            self._controller.render()

    def close(self) -> None:
        """Close the controller and the HTTP session it used."""
        self._controller.close()
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> "FractalViewer":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
