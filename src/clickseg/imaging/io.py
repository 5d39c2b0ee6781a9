"""Image file loading and saving."""

from __future__ import annotations

from dataclasses import dataclass
import io
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from clickseg.errors import ImageError
from clickseg.storage.atomic import atomic_write_bytes


@dataclass(frozen=True, slots=True)
class RawImage:
    """Decoded RGBA pixel buffer of a user supplied image."""

    pixels: np.ndarray
    source: str = "<memory>"

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @classmethod
    def from_array(cls, array: np.ndarray, source: str = "<memory>") -> RawImage:
        """Wrap an `H x W x 3` or `H x W x 4` uint8 array."""

        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ImageError(f"Expected HxWx3 or HxWx4 pixels, got shape {arr.shape}")
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise ImageError(f"Image must have positive width and height, got {arr.shape[:2]}")
        if arr.dtype != np.uint8:
            raise ImageError(f"Expected uint8 pixels, got {arr.dtype}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        pixels = np.array(arr, dtype=np.uint8, copy=True)
        pixels.setflags(write=False)
        return cls(pixels=pixels, source=source)


def load_image(path: Path) -> RawImage:
    """Decode an image file into RGBA pixels."""

    if not path.exists():
        raise ImageError(f"Image file does not exist: {path}")
    if not path.is_file():
        raise ImageError(f"Image path is not a file: {path}")
    try:
        with Image.open(path) as image:
            rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageError(f"Could not decode image {path}: {exc}") from exc
    return RawImage.from_array(rgba, source=str(path))


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an RGB, RGBA or single channel uint8 array as PNG."""

    arr = np.asarray(pixels)
    if arr.dtype == np.bool_:
        arr = arr.astype(np.uint8) * 255
    if arr.dtype != np.uint8:
        raise ImageError(f"Expected uint8 pixels for PNG encoding, got {arr.dtype}")
    buffer = io.BytesIO()
    Image.fromarray(arr).save(buffer, format="PNG")
    return buffer.getvalue()


def save_image(path: Path, pixels: np.ndarray) -> None:
    """Write pixels to `path` as PNG atomically."""

    atomic_write_bytes(path, encode_png(pixels))
