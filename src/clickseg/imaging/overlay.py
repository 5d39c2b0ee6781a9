"""Compose decoder masks over the displayed image."""

from __future__ import annotations

import math

import numpy as np
from PIL import Image

from clickseg.config.schema import OverlayConfig


def _fit_mask(mask: np.ndarray, height: int, width: int) -> np.ndarray:
    if mask.shape == (height, width):
        return mask
    resized = Image.fromarray(mask.astype(np.uint8) * 255).resize(
        (width, height), resample=Image.Resampling.NEAREST
    )
    return np.asarray(resized) > 0


def mask_to_rgba(
    mask: np.ndarray,
    color: tuple[int, int, int],
    alpha: float,
) -> np.ndarray:
    """Paint a boolean mask as an RGBA layer, transparent outside the mask."""

    if mask.ndim != 2:
        raise ValueError(f"Expected 2D mask, got shape {mask.shape}")
    layer = np.zeros(mask.shape + (4,), dtype=np.uint8)
    layer[mask, :3] = np.asarray(color, dtype=np.uint8)
    layer[mask, 3] = int(round(alpha * 255))
    return layer


def render_overlay(
    displayed: np.ndarray,
    mask: np.ndarray,
    config: OverlayConfig,
) -> np.ndarray:
    """Alpha-composite `mask` in `config.color` over an RGB image."""

    height, width = displayed.shape[:2]
    fitted = _fit_mask(np.asarray(mask, dtype=bool), height, width)

    base = displayed[..., :3].astype(np.float32)
    color = np.asarray(config.color, dtype=np.float32)
    weight = fitted[..., None].astype(np.float32) * config.alpha
    blended = base * (1.0 - weight) + color * weight
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def draw_click_marker(
    image: np.ndarray,
    x: float,
    y: float,
    color: tuple[int, int, int],
    size: int = 10,
) -> np.ndarray:
    """Return a copy of `image` with a filled square anchored at the click."""

    out = np.array(image, dtype=np.uint8, copy=True)
    height, width = out.shape[:2]
    left = int(math.floor(x))
    top = int(math.floor(y))
    x0, x1 = max(0, left), min(width, left + size)
    y0, y1 = max(0, top), min(height, top + size)
    if x0 < x1 and y0 < y1:
        out[y0:y1, x0:x1, :3] = np.asarray(color, dtype=np.uint8)
    return out
