"""Helpers shared by CLI commands."""

from __future__ import annotations

import math

from clickseg.config.loader import load_session_config, validate_session_config
from clickseg.config.profiles import apply_profile
from clickseg.config.schema import SessionConfig
from clickseg.errors import PromptError


def build_session_config(
    config_ref: str | None,
    profile: str | None = None,
    target_size: int | None = None,
) -> SessionConfig:
    """Load a config reference and layer CLI overrides on top."""

    cfg = load_session_config(config_ref)
    if profile is not None:
        apply_profile(cfg, profile)
    if target_size is not None:
        cfg.preprocess.target_size = target_size
    return validate_session_config(cfg)


def parse_point(text: str) -> tuple[float, float]:
    """Parse an `X,Y` canvas coordinate."""

    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 2:
        raise PromptError(f"Point must be given as X,Y, got '{text}'")
    try:
        x, y = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise PromptError(f"Point coordinates must be numbers, got '{text}'") from exc
    if not (math.isfinite(x) and math.isfinite(y)):
        raise PromptError(f"Point coordinates must be finite, got '{text}'")
    return x, y
