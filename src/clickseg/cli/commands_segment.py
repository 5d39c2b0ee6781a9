"""`clickseg segment` command."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from clickseg.cli.common import build_session_config, parse_point
from clickseg.export.results import export_click_result
from clickseg.imaging.io import save_image
from clickseg.inference.model import OnnxSegmentationModel, SegmentationModel
from clickseg.session import SegmentationSession


@dataclass(slots=True)
class SegmentCommand:
    """Embed one image and generate a mask for each click point."""

    image: Path
    point: list[str]
    """Click position on the displayed image as X,Y. Repeatable."""
    out: Path = Path("clickseg-out")
    config: str | None = None
    profile: str | None = None
    target_size: int | None = None


async def run_segment(
    command: SegmentCommand,
    model: SegmentationModel | None = None,
) -> list[dict]:
    cfg = build_session_config(command.config, command.profile, command.target_size)
    points = [parse_point(item) for item in command.point]
    session = SegmentationSession(model or OnnxSegmentationModel(cfg.model), cfg)

    print(session.status)
    loaded = await session.load_image(command.image)
    print(session.status)
    if not loaded:
        return []

    state = session.current
    if state is None:
        return []
    command.out.mkdir(parents=True, exist_ok=True)
    save_image(command.out / "displayed.png", state.normalized.displayed)

    exported: list[dict] = []
    for index, (x, y) in enumerate(points):
        result = await session.click(x, y)
        if result is None or session.canvas is None:
            continue
        exported.append(
            export_click_result(
                command.out,
                index,
                result,
                session.canvas,
                cfg.overlay,
                source=state.source,
            )
        )
        print(session.status)
    return exported


def execute(command: SegmentCommand) -> None:
    exported = asyncio.run(run_segment(command))
    for item in exported:
        print(f"mask path={item['path']} pixels={item['mask_pixels']} iou={item['iou']:.4f}")
    print(f"segment image={command.image} masks={len(exported)} out={command.out.resolve()}")
