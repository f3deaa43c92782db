"""Owned image resources for the display surface."""

from __future__ import annotations

import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError


class ImageHandle:
    """Displayable image built from a render response body.

    A handle owns its bytes until :meth:`release` is called. The display
    surface owns exactly one handle at a time and releases the previous one
    when a new render is shown.

    Parameters
    ----------
    data : bytes
        Encoded image bytes.
    format : str
        Lower-case image format understood by ``ipywidgets.Image``
        (``"png"``, ``"jpeg"``, ...).
    size : tuple[int, int]
        Pixel ``(width, height)``.
    """

    __slots__ = ("_data", "_format", "_size", "_released")

    def __init__(self, data: bytes, format: str, size: Tuple[int, int]) -> None:
        self._data: Optional[bytes] = bytes(data)
        self._format = str(format).lower()
        self._size = (int(size[0]), int(size[1]))
        self._released = False

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageHandle":
        """Identify ``data`` with Pillow and wrap it in a handle.

        Raises
        ------
        ValueError
            If ``data`` is empty or is not an image Pillow can identify.
        """
        if not data:
            raise ValueError("Empty image body.")
        try:
            with Image.open(io.BytesIO(data)) as img:
                fmt = img.format
                size = img.size
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise ValueError("Response body is not a readable image.") from e
        if not fmt:
            raise ValueError("Could not determine the image format.")
        return cls(data, fmt, size)

    @property
    def data(self) -> bytes:
        """Return the encoded bytes; raises once the handle is released."""
        if self._data is None:
            raise RuntimeError("ImageHandle has been released.")
        return self._data

    @property
    def format(self) -> str:
        """Return the lowercase Pillow format name, e.g. ``"png"``."""
        return self._format

    @property
    def size(self) -> Tuple[int, int]:
        """Return the pixel size as ``(width, height)``."""
        return self._size

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Drop the image bytes. Safe to call more than once."""
        self._data = None
        self._released = True

    def __repr__(self) -> str:
        state = "released" if self._released else f"{len(self._data or b'')} bytes"
        return f"ImageHandle(format={self._format!r}, size={self._size}, {state})"
