from __future__ import annotations

import sys
from concurrent.futures import Executor, Future
from unittest.mock import patch

from conftest import make_png
from fractal_nav import FractalViewer, ViewerConfig
from fractal_nav.display import OneShotOutput
from fractal_nav.image_handle import ImageHandle
from fractal_nav.render_client import RenderClient
from fractal_nav.view import View


class _ImmediateExecutor(Executor):
    def submit(self, fn, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class _Renderer:
    def __init__(self) -> None:
        self.views: list[View] = []

    def __call__(self, view: View) -> ImageHandle:
        self.views.append(view)
        return ImageHandle.from_bytes(make_png())


def _viewer(renderer: _Renderer, **kwargs) -> FractalViewer:
    return FractalViewer(renderer=renderer, executor=_ImmediateExecutor(), **kwargs)


def test_viewer_constructor_is_display_and_request_free() -> None:
    """Construction must not display anything or hit the render service."""
    renderer = _Renderer()
    module = sys.modules[FractalViewer.__module__]
    with patch.object(module, "display") as mocked_display:
        viewer = _viewer(renderer)

    assert viewer._has_been_displayed is False
    mocked_display.assert_not_called()
    assert renderer.views == []
    assert viewer.view == View(-0.5, 0.0, 3.0)


def test_first_display_renders_initial_view_once() -> None:
    renderer = _Renderer()
    viewer = _viewer(renderer)
    module = sys.modules[FractalViewer.__module__]

    with patch.object(module, "display") as mocked_display:
        viewer._ipython_display_()
        viewer._ipython_display_()

    assert mocked_display.call_count == 2
    assert isinstance(mocked_display.call_args.args[0], OneShotOutput)
    assert renderer.views == [View(-0.5, 0.0, 3.0)]
    assert viewer.surface.current_image is not None


def test_constructor_display_true_forces_immediate_display() -> None:
    renderer = _Renderer()
    module = sys.modules[FractalViewer.__module__]
    with patch.object(module, "display") as mocked_display:
        viewer = _viewer(renderer, display=True)

    assert viewer._has_been_displayed is True
    mocked_display.assert_called_once()
    assert len(renderer.views) == 1


def test_buttons_drive_the_controller() -> None:
    renderer = _Renderer()
    viewer = _viewer(renderer)
    s = viewer.surface

    s.zoom_in_button.click()
    assert viewer.view == View(-0.5, 0.0, 2.25)

    s.left_button.click()
    s.up_button.click()
    assert viewer.view.x == -0.5 - 0.5625
    assert viewer.view.y == -0.5625

    s.right_button.click()
    s.down_button.click()
    s.zoom_out_button.click()
    assert viewer.view.w == 2.25 * 1.25

    s.reset_button.click()
    assert viewer.view == View(-0.5, 0.0, 3.0)
    assert len(renderer.views) == 7


def test_default_viewer_uses_http_client_for_configured_endpoint() -> None:
    config = ViewerConfig(endpoint="http://render.test/api/render", timeout=2.5)
    with FractalViewer(config) as viewer:
        client = viewer._client
        assert isinstance(client, RenderClient)
        assert client.endpoint == "http://render.test/api/render"
        assert viewer.widget is viewer.surface.root_widget
