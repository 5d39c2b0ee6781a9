"""`clickseg normalize` command."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

from clickseg.imaging.io import load_image, save_image
from clickseg.imaging.normalizer import normalize


@dataclass(slots=True)
class NormalizeCommand:
    """Show how an image is resized and padded for the encoder."""

    image: Path
    target_size: int = 1024
    out: Path | None = None


def execute(command: NormalizeCommand) -> None:
    raw = load_image(command.image)
    normalized = normalize(raw, command.target_size)
    payload = {
        "source": raw.source,
        "width": raw.width,
        "height": raw.height,
        "tensor_shape": list(normalized.data.shape),
        **normalized.scale.to_dict(),
    }
    if command.out is not None:
        save_image(command.out, normalized.displayed)
        payload["displayed"] = str(command.out.resolve())
    print(json.dumps(payload, indent=2, sort_keys=True))
