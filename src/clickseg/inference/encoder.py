"""Encoder stage: normalized image tensor to image embedding."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from clickseg.errors import InferenceError
from clickseg.imaging.normalizer import NormalizedTensor
from clickseg.inference.runtime import ModelRunner


INPUT_KEY = "input_image"
OUTPUT_KEY = "image_embeddings"


@dataclass(frozen=True, slots=True)
class Embedding:
    """Read-only encoder output for one loaded image."""

    data: np.ndarray

    @classmethod
    def wrap(cls, array: np.ndarray) -> Embedding:
        data = np.array(array, dtype=np.float32, copy=True)
        data.setflags(write=False)
        return cls(data=data)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(x) for x in self.data.shape)


class EmbeddingStage:
    """Feed the encoder graph and extract its embedding output."""

    stage = "encoder"

    def __init__(self, runner: ModelRunner) -> None:
        self._runner = runner

    def embed(self, tensor: NormalizedTensor) -> Embedding:
        batch = tensor.data[None, ...].astype(np.float32, copy=False)
        try:
            outputs = self._runner.run({INPUT_KEY: batch})
        except InferenceError:
            raise
        except Exception as exc:
            raise InferenceError(self.stage, f"inference failed: {exc}") from exc

        if OUTPUT_KEY not in outputs:
            raise InferenceError(self.stage, f"missing output '{OUTPUT_KEY}'")
        return Embedding.wrap(outputs[OUTPUT_KEY])
