"""HTTP client for the external rendering service.

The service accepts a form-encoded ``POST`` with the three view components
``x``, ``y`` and ``w`` (as text) and answers with raw image bytes. Anything
else is a failure and surfaces as :class:`RenderError`.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import TimeoutLike
from .image_handle import ImageHandle
from .view import View

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class RenderError(RuntimeError):
    """A render request failed: transport error, bad status, or unreadable body."""


class RenderClient:
    """Issue render requests for a :class:`~fractal_nav.view.View`.

    Parameters
    ----------
    endpoint : str
        Render endpoint URL.
    session : requests.Session, optional
        Session to send requests through. When omitted the client creates
        (and later closes) its own.
    timeout : float, tuple or None
        Forwarded to ``requests``; ``None`` disables the timeout.

    Examples
    --------
    >>> client = RenderClient("http://localhost:8000/api/render")  # doctest: +SKIP
    >>> handle = client(View(-0.5, 0.0, 3.0))  # doctest: +SKIP
    """

    def __init__(
        self,
        endpoint: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: TimeoutLike = None,
    ) -> None:
        if not str(endpoint).strip():
            raise ValueError("endpoint must be a non-empty URL")
        self._endpoint = str(endpoint)
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        """Return the URL render requests are posted to."""
        return self._endpoint

    def render(self, view: View) -> ImageHandle:
        """POST ``view`` to the endpoint and return the rendered image.

        Raises
        ------
        RenderError
            On network failure, a non-success status, or a body that is not
            an image.
        """
        payload = view.payload()
        logger.debug("POST %s %s", self._endpoint, payload)
        try:
            response = self._session.post(
                self._endpoint,
                data=payload,
                allow_redirects=True,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise RenderError(f"Render request for {payload} failed: {e}") from e

        try:
            return ImageHandle.from_bytes(response.content)
        except ValueError as e:
            content_type = response.headers.get("Content-Type", "<unknown>")
            raise RenderError(
                f"Render response for {payload} is not an image "
                f"(Content-Type: {content_type})."
            ) from e

    __call__ = render

    def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "RenderClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
