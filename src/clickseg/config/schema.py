"""Dataclass-based configuration schema for clickseg."""

from dataclasses import dataclass, field


DEFAULT_ENCODER_PATH = "models/sam_vit_b_01ec64.encoder.preprocess.quant.onnx"
DEFAULT_DECODER_PATH = "models/sam_vit_b_01ec64.decoder.onnx"


@dataclass(slots=True)
class ModelConfig:
    """Locations and runtime options of the encoder and decoder graphs."""

    encoder_path: str = DEFAULT_ENCODER_PATH
    decoder_path: str = DEFAULT_DECODER_PATH
    providers: list[str] = field(default_factory=lambda: ["CPUExecutionProvider"])
    intra_op_threads: int = 0


@dataclass(slots=True)
class PreprocessConfig:
    """Image normalization options."""

    target_size: int = 1024


@dataclass(slots=True)
class PromptConfig:
    """Decoder prompt layout options."""

    point_label: int = 0
    padding_label: int = -1
    mask_input_size: int = 256


@dataclass(slots=True)
class OverlayConfig:
    """Mask overlay rendering options."""

    alpha: float = 0.5
    color: tuple[int, int, int] = (30, 144, 255)
    threshold: float = 0.0
    marker_color: tuple[int, int, int] = (0, 128, 0)
    marker_size: int = 10


@dataclass(slots=True)
class SessionConfig:
    """Top-level segmentation session configuration."""

    model: ModelConfig = field(default_factory=ModelConfig)
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
