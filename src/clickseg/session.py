"""Per-image segmentation session: embed once, decode on every click."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path

import numpy as np

from clickseg.config.schema import SessionConfig
from clickseg.errors import ImageError, InferenceError
from clickseg.imaging.io import RawImage, load_image
from clickseg.imaging.normalizer import NormalizedTensor, normalize
from clickseg.imaging.overlay import draw_click_marker, render_overlay
from clickseg.inference.decoder import MaskResult
from clickseg.inference.encoder import Embedding
from clickseg.inference.model import SegmentationModel
from clickseg.observability.logging import get_logger, log_event
from clickseg.observability.timing import timed
from clickseg.prompt.transcoder import DecoderPrompt, transcode


_LOGGER = get_logger("clickseg.session")


class SessionState(str, Enum):
    """Lifecycle of the current image slot."""

    EMPTY = "empty"
    EMBEDDING = "embedding"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ImageState:
    """Everything a decode needs for one loaded image."""

    generation: int
    source: str
    normalized: NormalizedTensor
    embedding: Embedding


@dataclass(frozen=True, slots=True)
class ClickResult:
    """Outcome of one click on the canvas."""

    x: float
    y: float
    image: ImageState
    prompt: DecoderPrompt
    mask: MaskResult
    elapsed_s: float
    displayed: bool

    @property
    def generation(self) -> int:
        return self.image.generation


class SegmentationSession:
    """Owns the current image and embedding.

    Loading a new image replaces the slot wholesale. Decodes already in
    flight keep the `ImageState` they captured and finish against it, but
    their result is only drawn if that image is still current. Concurrent
    clicks are not serialized; the last decode to finish is what the canvas
    shows.
    """

    def __init__(self, model: SegmentationModel, config: SessionConfig | None = None) -> None:
        self._model = model
        self._config = config or SessionConfig()
        self._current: ImageState | None = None
        self._generation = 0
        self.state = SessionState.EMPTY
        self.status = "-"
        self.canvas: np.ndarray | None = None
        self.last_result: ClickResult | None = None

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def current(self) -> ImageState | None:
        return self._current

    @property
    def ready(self) -> bool:
        return self.state is SessionState.READY and self._current is not None

    def _set_status(self, text: str) -> None:
        self.status = text
        log_event(_LOGGER, "status", level=logging.DEBUG, status=text)

    async def load_image(self, path: Path) -> bool:
        """Load an image file and embed it.

        Returns False without invoking the pipeline when the file cannot be
        read. Inference failures propagate as `InferenceError`.
        """

        try:
            raw = load_image(path)
        except ImageError as exc:
            log_event(_LOGGER, "image_rejected", level=logging.WARNING, path=str(path), error=str(exc))
            self._set_status(f"Could not load image: {exc}")
            return False
        return await self.load_raw(raw)

    async def load_raw(self, raw: RawImage) -> bool:
        """Normalize and embed an already decoded image.

        Returns False if a newer image was loaded while this one was being
        embedded; the stale embedding is dropped.
        """

        self._generation += 1
        generation = self._generation
        self._current = None
        self.canvas = None
        self.last_result = None
        self.state = SessionState.EMBEDDING
        self._set_status(
            f"Image size {raw.width}x{raw.height}. Loading the encoder model if needed "
            "and generating embedding..."
        )

        try:
            with timed(_LOGGER, "image_preprocessed", source=raw.source):
                normalized = normalize(raw, self._config.preprocess.target_size)
        except ImageError as exc:
            log_event(_LOGGER, "image_rejected", level=logging.WARNING, path=raw.source, error=str(exc))
            self.state = SessionState.EMPTY
            self._set_status(f"Could not load image: {exc}")
            return False

        try:
            with timed(_LOGGER, "embedding_generated", source=raw.source) as timer:
                embedding = await asyncio.to_thread(self._model.embed, normalized)
        except InferenceError as exc:
            if generation == self._generation:
                self.state = SessionState.FAILED
                self._set_status(f"Embedding failed: {exc}")
            raise

        if generation != self._generation:
            log_event(_LOGGER, "embedding_superseded", source=raw.source, generation=generation)
            return False

        self._current = ImageState(
            generation=generation,
            source=raw.source,
            normalized=normalized,
            embedding=embedding,
        )
        self.canvas = np.array(normalized.displayed, copy=True)
        self.state = SessionState.READY
        self._set_status(
            f"Embedding generated in : {timer.elapsed_s:.3f} seconds. "
            "Click on the image to generate a mask"
        )
        return True

    async def click(self, x: float, y: float) -> ClickResult | None:
        """Decode a mask for a click on the displayed canvas.

        A click before an embedding exists is ignored and returns None.
        """

        current = self._current
        if not self.ready or current is None:
            log_event(_LOGGER, "click_ignored", x=x, y=y, state=self.state.value)
            return None

        normalized = current.normalized
        self._set_status(f"Point ({x}, {y}). Loading the decoder model if needed and generating mask...")
        prompt = transcode(
            x,
            y,
            normalized.canvas_height,
            normalized.canvas_width,
            self._config.prompt,
        )

        try:
            with timed(_LOGGER, "mask_generated", x=x, y=y, generation=current.generation) as timer:
                mask = await asyncio.to_thread(self._model.decode, current.embedding, prompt)
        except InferenceError as exc:
            if self._current is current:
                self._set_status(f"Mask generation failed: {exc}")
            raise

        displayed = self._current is current
        result = ClickResult(
            x=x,
            y=y,
            image=current,
            prompt=prompt,
            mask=mask,
            elapsed_s=timer.elapsed_s,
            displayed=displayed,
        )
        if not displayed:
            log_event(_LOGGER, "mask_discarded", x=x, y=y, generation=current.generation)
            return result

        self.canvas = self.render(result)
        self.last_result = result
        self._set_status("Mask generated. Click on the image to generate a new mask")
        return result

    def render(self, result: ClickResult) -> np.ndarray:
        """Draw the click marker and mask over the image the click was decoded against."""

        overlay_cfg = self._config.overlay
        marked = draw_click_marker(
            result.image.normalized.displayed,
            result.x,
            result.y,
            overlay_cfg.marker_color,
            overlay_cfg.marker_size,
        )
        return render_overlay(marked, result.mask.binary_mask(overlay_cfg.threshold), overlay_cfg)
