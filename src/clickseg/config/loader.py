"""Load session configs from Python references or JSON files."""

from __future__ import annotations

import importlib
import importlib.util
from pathlib import Path
from types import ModuleType
from typing import Any

from clickseg.config.schema import (
    ModelConfig,
    OverlayConfig,
    PreprocessConfig,
    PromptConfig,
    SessionConfig,
)
from clickseg.errors import ConfigError
from clickseg.storage.atomic import read_json


def _load_module(module_ref: str) -> ModuleType:
    path_candidate = Path(module_ref).expanduser()
    if path_candidate.exists():
        module_name = f"_clickseg_cfg_{path_candidate.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path_candidate)
        if spec is None or spec.loader is None:
            raise ConfigError(f"Could not load module from path: {path_candidate}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    try:
        return importlib.import_module(module_ref)
    except ImportError as exc:
        raise ConfigError(f"Could not import config module: {module_ref}") from exc


def _resolve_attr(obj: Any, attr_path: str) -> Any:
    value = obj
    for part in attr_path.split("."):
        try:
            value = getattr(value, part)
        except AttributeError as exc:
            raise ConfigError(f"Config attribute not found: {attr_path}") from exc
    return value


def load_object(reference: str) -> Any:
    """Load object by `module_or_path:attribute` reference."""

    if ":" not in reference:
        raise ConfigError("Config reference must be in form 'module_or_path:attribute'.")
    module_ref, attr = reference.split(":", maxsplit=1)
    module = _load_module(module_ref)
    return _resolve_attr(module, attr)


def validate_session_config(config: SessionConfig) -> SessionConfig:
    """Reject values the pipeline cannot work with."""

    if config.preprocess.target_size <= 0:
        raise ConfigError(f"target_size must be positive, got {config.preprocess.target_size}")
    if config.prompt.mask_input_size <= 0:
        raise ConfigError(
            f"mask_input_size must be positive, got {config.prompt.mask_input_size}"
        )
    if not 0.0 <= config.overlay.alpha <= 1.0:
        raise ConfigError(f"overlay alpha must be within [0, 1], got {config.overlay.alpha}")
    if not config.model.providers:
        raise ConfigError("At least one execution provider is required.")
    return config


def load_session_config(config_ref: str | None) -> SessionConfig:
    """Load a SessionConfig from a JSON file or Python reference, or create a default."""

    if config_ref is None:
        return SessionConfig()
    if config_ref.endswith(".json"):
        return load_session_config_json(Path(config_ref).expanduser())

    loaded = load_object(config_ref)
    if not isinstance(loaded, SessionConfig):
        type_name = type(loaded).__name__
        raise ConfigError(
            f"Config reference must resolve to SessionConfig, got {type_name}."
        )
    return validate_session_config(loaded)


def session_config_from_dict(payload: dict[str, Any]) -> SessionConfig:
    """Reconstruct a SessionConfig from a plain dictionary."""

    model = dict(payload.get("model", {}))
    preprocess = payload.get("preprocess", {})
    prompt = payload.get("prompt", {})
    overlay = dict(payload.get("overlay", {}))

    if "providers" in model:
        model["providers"] = list(model["providers"])
    for key in ("color", "marker_color"):
        if key in overlay:
            overlay[key] = tuple(int(x) for x in overlay[key])

    try:
        config = SessionConfig(
            model=ModelConfig(**model),
            preprocess=PreprocessConfig(**preprocess),
            prompt=PromptConfig(**prompt),
            overlay=OverlayConfig(**overlay),
        )
    except TypeError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
    return validate_session_config(config)


def load_session_config_json(path: Path) -> SessionConfig:
    """Load a SessionConfig from a JSON document shaped like the dataclasses."""

    if not path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        payload = read_json(path)
    except ValueError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must hold a JSON object: {path}")
    return session_config_from_dict(payload)
