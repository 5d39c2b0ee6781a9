from __future__ import annotations

import json
from pathlib import Path

import pytest

from clickseg.cli.common import build_session_config
from clickseg.config.loader import (
    load_object,
    load_session_config,
    session_config_from_dict,
)
from clickseg.config.profiles import apply_profile, available_profiles, resolve_profile
from clickseg.config.schema import SessionConfig
from clickseg.errors import ConfigError


def test_default_config():
    cfg = load_session_config(None)

    assert cfg.preprocess.target_size == 1024
    assert cfg.prompt.point_label == 0
    assert cfg.prompt.padding_label == -1
    assert cfg.overlay.alpha == 0.5
    assert cfg.model.decoder_path.endswith("decoder.onnx")


def test_load_config_from_file(tmp_path: Path):
    module = tmp_path / "my_cfg.py"
    module.write_text(
        "from clickseg.config.schema import PreprocessConfig, SessionConfig\n"
        "CONFIG = SessionConfig(preprocess=PreprocessConfig(target_size=512))\n"
        "OTHER = 3\n",
        encoding="utf-8",
    )

    cfg = load_session_config(f"{module}:CONFIG")
    assert cfg.preprocess.target_size == 512

    with pytest.raises(ConfigError, match="SessionConfig"):
        load_session_config(f"{module}:OTHER")
    with pytest.raises(ConfigError):
        load_object(f"{module}:MISSING")


def test_reference_requires_attribute():
    with pytest.raises(ConfigError):
        load_object("clickseg.config.schema")


def test_config_from_dict():
    cfg = session_config_from_dict(
        {
            "model": {"providers": ["CUDAExecutionProvider"]},
            "preprocess": {"target_size": 256},
            "overlay": {"color": [1, 2, 3]},
        }
    )

    assert cfg.model.providers == ["CUDAExecutionProvider"]
    assert cfg.preprocess.target_size == 256
    assert cfg.overlay.color == (1, 2, 3)


def test_config_from_dict_rejects_bad_values():
    with pytest.raises(ConfigError):
        session_config_from_dict({"preprocess": {"target_size": 0}})
    with pytest.raises(ConfigError):
        session_config_from_dict({"overlay": {"alpha": 1.5}})
    with pytest.raises(ConfigError):
        session_config_from_dict({"prompt": {"unknown": 1}})


def test_apply_profile():
    cfg = SessionConfig()

    profile = apply_profile(cfg, " CUDA ")

    assert profile.name == "cuda"
    assert cfg.model.providers[0] == "CUDAExecutionProvider"
    assert cfg.model.intra_op_threads == profile.intra_op_threads


def test_profile_keeps_configured_model_paths(tmp_path: Path):
    module = tmp_path / "paths_cfg.py"
    module.write_text(
        "from clickseg.config.schema import ModelConfig, SessionConfig\n"
        "CONFIG = SessionConfig(model=ModelConfig(\n"
        "    encoder_path=\"/opt/enc.onnx\", decoder_path=\"/opt/dec.onnx\"))\n",
        encoding="utf-8",
    )

    cfg = build_session_config(f"{module}:CONFIG", "cuda")

    assert cfg.model.encoder_path == "/opt/enc.onnx"
    assert cfg.model.decoder_path == "/opt/dec.onnx"
    assert cfg.model.providers == ["CUDAExecutionProvider", "CPUExecutionProvider"]


def test_load_config_from_json_file(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"model": {"encoder_path": "/opt/enc.onnx"}, "prompt": {"point_label": 1}}),
        encoding="utf-8",
    )

    cfg = load_session_config(str(path))

    assert cfg.model.encoder_path == "/opt/enc.onnx"
    assert cfg.prompt.point_label == 1
    assert cfg.preprocess.target_size == 1024


def test_json_config_errors(tmp_path: Path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigError, match="valid JSON"):
        load_session_config(str(broken))
    with pytest.raises(ConfigError, match="JSON object"):
        load_session_config(str(listing))
    with pytest.raises(ConfigError, match="does not exist"):
        load_session_config(str(tmp_path / "absent.json"))


def test_unknown_profile():
    assert "cpu" in available_profiles()
    with pytest.raises(ConfigError, match="Available profiles"):
        resolve_profile("tpu")
