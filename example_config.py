"""Example clickseg session config.

Use with `clickseg segment IMAGE --point 500,300 --config example_config.py:SESSION`.
"""

from clickseg.config.schema import (
    ModelConfig,
    OverlayConfig,
    PreprocessConfig,
    PromptConfig,
    SessionConfig,
)


MODEL_DIR = "models"

SESSION = SessionConfig(
    model=ModelConfig(
        encoder_path=f"{MODEL_DIR}/sam_vit_b_01ec64.encoder.preprocess.quant.onnx",
        decoder_path=f"{MODEL_DIR}/sam_vit_b_01ec64.decoder.onnx",
        providers=["CPUExecutionProvider"],
    ),
    preprocess=PreprocessConfig(
        target_size=1024,
    ),
    prompt=PromptConfig(
        point_label=0,
        padding_label=-1,
    ),
    overlay=OverlayConfig(
        alpha=0.5,
        color=(30, 144, 255),
    ),
)
