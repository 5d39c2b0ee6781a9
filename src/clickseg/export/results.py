"""Write click results to disk."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from clickseg.config.schema import OverlayConfig
from clickseg.imaging.io import save_image
from clickseg.imaging.overlay import mask_to_rgba
from clickseg.inference.decoder import MaskResult
from clickseg.session import ClickResult
from clickseg.storage.atomic import atomic_write_json


_PREVIEW_VALUES = 20


def summarize_output(array: np.ndarray) -> dict[str, Any]:
    """Short preview of one decoder output: leading values, size and dims."""

    arr = np.asarray(array)
    flat = arr.reshape(-1)[:_PREVIEW_VALUES]
    return {
        "data": [float(x) for x in flat],
        "size": int(arr.size),
        "dims": [int(x) for x in arr.shape],
    }


def summarize_result(result: MaskResult) -> dict[str, Any]:
    return {name: summarize_output(value) for name, value in result.to_outputs().items()}


def export_click_result(
    out_dir: Path,
    index: int,
    result: ClickResult,
    canvas: np.ndarray,
    overlay: OverlayConfig,
    *,
    source: str | None = None,
) -> dict[str, Any]:
    """Save mask layer, composited canvas and JSON summary for one click."""

    stem = f"click_{index:03d}"
    mask_path = out_dir / f"{stem}_mask.png"
    overlay_path = out_dir / f"{stem}_overlay.png"
    json_path = out_dir / f"{stem}.json"

    binary = result.mask.binary_mask(overlay.threshold)
    save_image(mask_path, mask_to_rgba(binary, overlay.color, overlay.alpha))
    save_image(overlay_path, canvas)

    payload = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "source": source,
        "point": [float(result.x), float(result.y)],
        "point_coords": result.prompt.point_coords.tolist(),
        "point_labels": result.prompt.point_labels.tolist(),
        "orig_im_size": result.prompt.orig_im_size.tolist(),
        "iou": result.mask.iou,
        "mask_pixels": int(np.count_nonzero(binary)),
        "elapsed_s": float(result.elapsed_s),
        "outputs": summarize_result(result.mask),
        "files": {
            "mask": str(mask_path.resolve()),
            "overlay": str(overlay_path.resolve()),
        },
    }
    atomic_write_json(json_path, payload)
    return {
        "path": str(json_path.resolve()),
        "mask_pixels": payload["mask_pixels"],
        "iou": payload["iou"],
    }
