from __future__ import annotations

import threading
from typing import Mapping

import numpy as np
import pytest

from clickseg.imaging.io import RawImage
from clickseg.imaging.normalizer import NormalizedTensor
from clickseg.inference.decoder import MaskResult
from clickseg.inference.encoder import Embedding
from clickseg.prompt.transcoder import DecoderPrompt


class RecordingRunner:
    """ModelRunner stub that records every feed and returns canned outputs."""

    def __init__(self, outputs: dict[str, np.ndarray] | None = None, error: Exception | None = None):
        self.outputs = outputs or {}
        self.error = error
        self.calls: list[dict[str, np.ndarray]] = []

    def run(self, inputs: Mapping[str, np.ndarray]) -> dict[str, np.ndarray]:
        self.calls.append(dict(inputs))
        if self.error is not None:
            raise self.error
        return dict(self.outputs)


class StubModel:
    """SegmentationModel stub.

    The embedding is a constant array tagged with the image's top-left red
    value so tests can tell which image a decode used. Decoded masks are a
    square around the click in canvas coordinates.
    """

    def __init__(self) -> None:
        self.embed_calls = 0
        self.decode_calls: list[tuple[Embedding, DecoderPrompt]] = []
        self.embed_error: Exception | None = None
        self.embed_gates: list[threading.Event] = []
        self.decode_gates: list[threading.Event] = []
        self._lock = threading.Lock()

    def embed(self, tensor: NormalizedTensor) -> Embedding:
        with self._lock:
            index = self.embed_calls
            self.embed_calls += 1
        if index < len(self.embed_gates):
            self.embed_gates[index].wait(timeout=5)
        if self.embed_error is not None:
            raise self.embed_error
        tag = float(tensor.data[0, 0, 0])
        return Embedding.wrap(np.full((1, 4, 2, 2), tag, dtype=np.float32))

    def decode(self, embedding: Embedding, prompt: DecoderPrompt) -> MaskResult:
        with self._lock:
            index = len(self.decode_calls)
            self.decode_calls.append((embedding, prompt))
        if index < len(self.decode_gates):
            self.decode_gates[index].wait(timeout=5)
        height, width = (int(v) for v in prompt.orig_im_size)
        x, y = (int(v) for v in prompt.click)
        masks = np.full((1, 1, height, width), -1.0, dtype=np.float32)
        masks[0, 0, max(0, y - 2) : y + 3, max(0, x - 2) : x + 3] = 1.0
        return MaskResult(
            masks=masks,
            low_res_masks=np.zeros((1, 1, 256, 256), dtype=np.float32),
            iou_predictions=np.array([[0.9]], dtype=np.float32),
        )


def solid_image(width: int, height: int, rgb: tuple[int, int, int] = (10, 20, 30)) -> RawImage:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = rgb[0]
    pixels[..., 1] = rgb[1]
    pixels[..., 2] = rgb[2]
    pixels[..., 3] = 255
    return RawImage.from_array(pixels)


@pytest.fixture
def stub_model() -> StubModel:
    return StubModel()
