"""Map a canvas click onto the decoder's fixed-arity prompt layout."""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from clickseg.config.schema import PromptConfig
from clickseg.errors import PromptError


@dataclass(frozen=True, slots=True)
class DecoderPrompt:
    """Prompt tensors for one click, everything except the embedding.

    The decoder accepts several points, so a single click is followed by a
    padding point at (0, 0) whose label tells the model to ignore it. A prior
    mask is never supplied; the zero mask and `has_mask_input = 0` only fill
    the required input slots.
    """

    point_coords: np.ndarray
    point_labels: np.ndarray
    mask_input: np.ndarray
    has_mask_input: np.ndarray
    orig_im_size: np.ndarray

    @property
    def click(self) -> tuple[float, float]:
        return float(self.point_coords[0, 0, 0]), float(self.point_coords[0, 0, 1])

    def to_feeds(self) -> dict[str, np.ndarray]:
        return {
            "point_coords": self.point_coords,
            "point_labels": self.point_labels,
            "mask_input": self.mask_input,
            "has_mask_input": self.has_mask_input,
            "orig_im_size": self.orig_im_size,
        }


def transcode(
    click_x: float,
    click_y: float,
    canvas_height: int,
    canvas_width: int,
    config: PromptConfig | None = None,
) -> DecoderPrompt:
    """Build decoder prompt tensors for a click on the displayed canvas.

    Coordinates are used as-is: the canvas shows the normalized image, which
    is the coordinate space the decoder expects.
    """

    cfg = config or PromptConfig()
    if not (math.isfinite(click_x) and math.isfinite(click_y)):
        raise PromptError(f"Click coordinates must be finite, got ({click_x}, {click_y})")
    if canvas_height <= 0 or canvas_width <= 0:
        raise PromptError(
            f"Canvas must have positive width and height, got {canvas_width}x{canvas_height}"
        )

    point_coords = np.array([[[click_x, click_y], [0.0, 0.0]]], dtype=np.float32)
    point_labels = np.array([[cfg.point_label, cfg.padding_label]], dtype=np.float32)
    size = cfg.mask_input_size
    mask_input = np.zeros((1, 1, size, size), dtype=np.float32)
    has_mask_input = np.zeros((1,), dtype=np.float32)
    orig_im_size = np.array([canvas_height, canvas_width], dtype=np.float32)

    return DecoderPrompt(
        point_coords=point_coords,
        point_labels=point_labels,
        mask_input=mask_input,
        has_mask_input=has_mask_input,
        orig_im_size=orig_im_size,
    )
