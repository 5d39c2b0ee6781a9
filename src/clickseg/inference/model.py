"""Two-method capability interface over the encoder and decoder stages."""

from __future__ import annotations

from typing import Protocol

from clickseg.config.schema import ModelConfig
from clickseg.imaging.normalizer import NormalizedTensor
from clickseg.inference.decoder import MaskResult, MaskStage
from clickseg.inference.encoder import Embedding, EmbeddingStage
from clickseg.inference.runtime import ModelRunner, OnnxRunner
from clickseg.prompt.transcoder import DecoderPrompt


class SegmentationModel(Protocol):
    """Expensive one-shot `embed`, cheap repeatable `decode`."""

    def embed(self, tensor: NormalizedTensor) -> Embedding:
        ...

    def decode(self, embedding: Embedding, prompt: DecoderPrompt) -> MaskResult:
        ...


class StagedSegmentationModel:
    """SegmentationModel built from one runner per stage."""

    def __init__(self, encoder: ModelRunner, decoder: ModelRunner) -> None:
        self.encoder = EmbeddingStage(encoder)
        self.decoder = MaskStage(decoder)

    def embed(self, tensor: NormalizedTensor) -> Embedding:
        return self.encoder.embed(tensor)

    def decode(self, embedding: Embedding, prompt: DecoderPrompt) -> MaskResult:
        return self.decoder.decode(embedding, prompt)


class OnnxSegmentationModel(StagedSegmentationModel):
    """SegmentationModel backed by two ONNX Runtime sessions."""

    def __init__(self, config: ModelConfig) -> None:
        self.encoder_runner = OnnxRunner.for_stage("encoder", config.encoder_path, config)
        self.decoder_runner = OnnxRunner.for_stage("decoder", config.decoder_path, config)
        super().__init__(self.encoder_runner, self.decoder_runner)
