"""Decoder stage: embedding plus click prompt to mask."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from clickseg.errors import InferenceError
from clickseg.inference.encoder import OUTPUT_KEY as EMBEDDING_KEY, Embedding
from clickseg.inference.runtime import ModelRunner
from clickseg.prompt.transcoder import DecoderPrompt


OUTPUT_KEYS = ("masks", "low_res_masks", "iou_predictions")


@dataclass(frozen=True, slots=True)
class MaskResult:
    """Decoder outputs for one click."""

    masks: np.ndarray
    low_res_masks: np.ndarray
    iou_predictions: np.ndarray

    @property
    def best_index(self) -> int:
        scores = np.asarray(self.iou_predictions).reshape(-1)
        if scores.size == 0:
            return 0
        return int(np.argmax(scores))

    @property
    def iou(self) -> float:
        scores = np.asarray(self.iou_predictions).reshape(-1)
        if scores.size == 0:
            return float("nan")
        return float(scores[self.best_index])

    def mask_logits(self) -> np.ndarray:
        """Return the highest scoring mask as a 2D array."""

        masks = np.asarray(self.masks)
        if masks.ndim == 2:
            return masks
        if masks.ndim == 3:
            return masks[min(self.best_index, masks.shape[0] - 1)]
        if masks.ndim == 4:
            return masks[0, min(self.best_index, masks.shape[1] - 1)]
        raise ValueError(f"Unexpected mask shape: {masks.shape}")

    def binary_mask(self, threshold: float = 0.0) -> np.ndarray:
        return self.mask_logits() > threshold

    def to_outputs(self) -> dict[str, Any]:
        return {
            "masks": self.masks,
            "low_res_masks": self.low_res_masks,
            "iou_predictions": self.iou_predictions,
        }


def build_decoder_feeds(embedding: Embedding, prompt: DecoderPrompt) -> dict[str, np.ndarray]:
    """Assemble the decoder's six named inputs."""

    feeds = {EMBEDDING_KEY: embedding.data}
    feeds.update(prompt.to_feeds())
    return feeds


class MaskStage:
    """Feed the decoder graph and collect its three outputs."""

    stage = "decoder"

    def __init__(self, runner: ModelRunner) -> None:
        self._runner = runner

    def decode(self, embedding: Embedding, prompt: DecoderPrompt) -> MaskResult:
        try:
            outputs = self._runner.run(build_decoder_feeds(embedding, prompt))
        except InferenceError:
            raise
        except Exception as exc:
            raise InferenceError(self.stage, f"inference failed: {exc}") from exc

        missing = [key for key in OUTPUT_KEYS if key not in outputs]
        if missing:
            raise InferenceError(self.stage, f"missing outputs: {', '.join(missing)}")
        return MaskResult(
            masks=np.asarray(outputs["masks"]),
            low_res_masks=np.asarray(outputs["low_res_masks"]),
            iou_predictions=np.asarray(outputs["iou_predictions"]),
        )
