"""Display surface for the viewport controls.

This module builds the notebook widget tree that hosts the three view fields,
the rendered image, and the navigation buttons. The controller only talks to
it through the small :class:`DisplaySurface` protocol, so tests and other
hosts can provide their own surface.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

import ipywidgets as widgets
from IPython.display import display

from .image_handle import ImageHandle

FIELD_NAMES = ("x", "y", "w")
FIELD_LABELS = {"x": "x-coordinate", "y": "y-coordinate", "w": "window-length"}


@runtime_checkable
class DisplaySurface(Protocol):
    @property
    def current_image(self) -> Optional[ImageHandle]: ...

    @property
    def alt_text(self) -> str: ...

    def get_field(self, name: str) -> str: ...

    def set_field(self, name: str, text: str) -> None: ...

    def show_image(self, handle: ImageHandle, alt: str) -> None: ...

    def clear_image(self) -> None: ...


# SECTION: OneShotOutput [id: OneShotOutput]
# =============================================================================


class OneShotOutput(widgets.Output):
    """
    An Output widget that can only be displayed once.

    Displaying the same live widget twice leaves two frontend views bound to
    one model, so the second display attempt raises instead.

    Examples
    --------
    >>> out = OneShotOutput()  # doctest: +SKIP
    >>> display(out)  # ok  # doctest: +SKIP
    >>> display(out)  # raises RuntimeError  # doctest: +SKIP
    """

    __slots__ = ("_displayed",)

    def __init__(self) -> None:
        super().__init__()
        self._displayed = False

    def _repr_mimebundle_(
        self, include: Any = None, exclude: Any = None, **kwargs: Any
    ) -> Any:
        if self._displayed:
            raise RuntimeError(
                "OneShotOutput has already been displayed. "
                "This widget supports only one-time display."
            )
        self._displayed = True
        return super()._repr_mimebundle_(include=include, exclude=exclude, **kwargs)

    @property
    def has_been_displayed(self) -> bool:
        """Return True once the widget has been displayed."""
        return self._displayed


# =============================================================================
# SECTION: WidgetSurface (The View) [id: WidgetSurface]
# =============================================================================


class WidgetSurface:
    """
    ipywidgets implementation of :class:`DisplaySurface`.

    Responsibilities:
    - Building the field row, the image area and the navigation button pad.
    - Get/set access to the three view fields by name (``x``, ``y``, ``w``).
    - Owning the displayed :class:`ImageHandle` and releasing it when a newer
      render replaces it.

    The navigation buttons are exposed as attributes (``left_button``,
    ``zoom_in_button``, ``reset_button``, ...); wiring them to actions is the
    caller's job.
    """

    def __init__(self, *, image_width: str = "512px", image_height: str = "512px") -> None:
        """Build the widget tree.

        Parameters
        ----------
        image_width, image_height : str, optional
            CSS size of the image area.
        """
        self._current_image: Optional[ImageHandle] = None
        self._alt_text = ""

        # 1. View fields
        #    Text (not FloatText) so the fields accept expressions like "pi/4".
        self.fields: Dict[str, widgets.Text] = {
            name: widgets.Text(
                value="",
                description=FIELD_LABELS[name],
                continuous_update=False,
                style={"description_width": "110px"},
                layout=widgets.Layout(width="260px"),
            )
            for name in FIELD_NAMES
        }
        self._fields_box = widgets.VBox(
            [self.fields[name] for name in FIELD_NAMES],
            layout=widgets.Layout(margin="0 0 6px 0"),
        )

        # 2. Image area
        self.image = widgets.Image(
            value=b"",
            format="png",
            layout=widgets.Layout(
                width=image_width,
                height=image_height,
                border="1px solid rgba(15,23,42,0.08)",
                object_fit="contain",
            ),
        )

        # 3. Navigation pad
        button_layout = widgets.Layout(width="44px")
        self.left_button = widgets.Button(description="←", tooltip="Move left", layout=button_layout)
        self.right_button = widgets.Button(description="→", tooltip="Move right", layout=button_layout)
        self.up_button = widgets.Button(description="↑", tooltip="Move up", layout=button_layout)
        self.down_button = widgets.Button(description="↓", tooltip="Move down", layout=button_layout)
        self.zoom_in_button = widgets.Button(description="+", tooltip="Zoom in", layout=button_layout)
        self.zoom_out_button = widgets.Button(description="−", tooltip="Zoom out", layout=button_layout)
        self.reset_button = widgets.Button(
            description="Reset", tooltip="Reset view", layout=widgets.Layout(width="92px")
        )
        self._pad = widgets.HBox(
            [
                self.left_button,
                self.up_button,
                self.down_button,
                self.right_button,
                self.zoom_in_button,
                self.zoom_out_button,
                self.reset_button,
            ],
            layout=widgets.Layout(margin="6px 0 0 0"),
        )

        # 4. Root Widget
        self.root_widget = widgets.VBox(
            [self._fields_box, self.image, self._pad],
            layout=widgets.Layout(width="100%"),
        )

    @property
    def widget(self) -> widgets.VBox:
        """Return the root widget for embedding in other layouts."""
        return self.root_widget

    @property
    def output_widget(self) -> OneShotOutput:
        """Return a OneShotOutput wrapping the layout, ready for display."""
        out = OneShotOutput()
        with out:
            display(self.root_widget)
        return out

    def _require_field(self, name: str) -> widgets.Text:
        try:
            return self.fields[name]
        except KeyError:
            raise KeyError(f"Unknown view field: {name!r}") from None

    def get_field(self, name: str) -> str:
        """Return the raw text of field ``name`` (``"x"``, ``"y"`` or ``"w"``).

        Raises
        ------
        KeyError
            If ``name`` is not a view field.
        """
        return self._require_field(name).value

    def set_field(self, name: str, text: str) -> None:
        """Write ``text`` into field ``name``."""
        self._require_field(name).value = str(text)

    @property
    def current_image(self) -> Optional[ImageHandle]:
        """Return the handle currently shown, or ``None`` before the first render."""
        return self._current_image

    @property
    def alt_text(self) -> str:
        """Return the accessible description of the current image."""
        return self._alt_text

    def show_image(self, handle: ImageHandle, alt: str) -> None:
        """Show ``handle`` and release the handle it replaces.

        The widget receives the new bytes before the previous handle is
        released, so the image area never goes blank in between.
        """
        previous = self._current_image
        self.image.format = handle.format
        self.image.value = handle.data
        self.image.tooltip = alt
        self._alt_text = alt
        self._current_image = handle
        if previous is not None and previous is not handle:
            previous.release()

    def clear_image(self) -> None:
        """Release the displayed handle and blank the image area."""
        previous = self._current_image
        self._current_image = None
        self.image.value = b""
        if previous is not None:
            previous.release()
