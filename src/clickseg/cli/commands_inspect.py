"""`clickseg inspect-models` command."""

from __future__ import annotations

from dataclasses import dataclass
import json

from clickseg.cli.common import build_session_config
from clickseg.inference.runtime import OnnxRunner


@dataclass(slots=True)
class InspectModelsCommand:
    """Print the declared inputs and outputs of the encoder and decoder graphs."""

    config: str | None = None
    profile: str | None = None


def execute(command: InspectModelsCommand) -> None:
    cfg = build_session_config(command.config, command.profile)
    runners = [
        OnnxRunner.for_stage("encoder", cfg.model.encoder_path, cfg.model),
        OnnxRunner.for_stage("decoder", cfg.model.decoder_path, cfg.model),
    ]
    payload = [runner.describe() for runner in runners]
    print(json.dumps(payload, indent=2))
