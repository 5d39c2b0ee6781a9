"""Resize and pad images into the encoder's square input tensor."""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np
from PIL import Image

from clickseg.errors import ImageError
from clickseg.imaging.io import RawImage


@dataclass(frozen=True, slots=True)
class ScaleRecord:
    """How the source image was scaled into the padded square."""

    resized_width: int
    resized_height: int
    scale_factor: float

    def to_dict(self) -> dict[str, float]:
        return {
            "resized_width": int(self.resized_width),
            "resized_height": int(self.resized_height),
            "scale_factor": float(self.scale_factor),
        }


@dataclass(frozen=True, slots=True)
class NormalizedTensor:
    """Channel-first `3 x S x S` float32 tensor with values in [0, 255].

    `displayed` holds the resized, unpadded RGB image. It is what the user
    sees and clicks on, so click coordinates live in its pixel space.
    """

    data: np.ndarray
    scale: ScaleRecord
    displayed: np.ndarray

    @property
    def target_size(self) -> int:
        return int(self.data.shape[-1])

    @property
    def canvas_height(self) -> int:
        return self.scale.resized_height

    @property
    def canvas_width(self) -> int:
        return self.scale.resized_width


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resized_dimensions(width: int, height: int, target_size: int) -> tuple[int, int]:
    """Return `(resized_width, resized_height)` with the long side at `target_size`."""

    if width <= 0 or height <= 0:
        raise ImageError(f"Image must have positive width and height, got {width}x{height}")
    if target_size <= 0:
        raise ImageError(f"Target size must be positive, got {target_size}")

    if height > width:
        resized_height = target_size
        resized_width = _round_half_up(width / height * target_size)
    else:
        resized_width = target_size
        resized_height = _round_half_up(height / width * target_size)
    # Extremely thin images would otherwise collapse to zero pixels.
    return max(1, resized_width), max(1, resized_height)


def normalize(image: RawImage, target_size: int = 1024) -> NormalizedTensor:
    """Resize `image` to fit `target_size` and zero-pad it bottom/right."""

    resized_width, resized_height = resized_dimensions(image.width, image.height, target_size)

    rgb = Image.fromarray(np.asarray(image.pixels, dtype=np.uint8)).convert("RGB")
    if (resized_width, resized_height) != rgb.size:
        rgb = rgb.resize((resized_width, resized_height), resample=Image.Resampling.BILINEAR)
    displayed = np.array(rgb, dtype=np.uint8)
    displayed.setflags(write=False)

    data = np.zeros((3, target_size, target_size), dtype=np.float32)
    data[:, :resized_height, :resized_width] = np.transpose(displayed, (2, 0, 1))

    scale = ScaleRecord(
        resized_width=resized_width,
        resized_height=resized_height,
        scale_factor=target_size / max(image.width, image.height),
    )
    return NormalizedTensor(data=data, scale=scale, displayed=displayed)
