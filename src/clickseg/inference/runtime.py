"""ONNX Runtime session wrapper."""

from __future__ import annotations

from pathlib import Path
import threading
from typing import Any, Mapping, Protocol

import numpy as np
import onnxruntime as ort

from clickseg.config.schema import ModelConfig
from clickseg.errors import InferenceError
from clickseg.observability.logging import get_logger
from clickseg.observability.timing import timed


_LOGGER = get_logger("clickseg.runtime")


class ModelRunner(Protocol):
    """Opaque model graph: named input arrays in, named output arrays out."""

    def run(self, inputs: Mapping[str, np.ndarray]) -> dict[str, np.ndarray]:
        ...


def _select_providers(requested: list[str]) -> list[str]:
    available = set(ort.get_available_providers())
    selected = [name for name in requested if name in available]
    if not selected:
        selected = ["CPUExecutionProvider"]
    return selected


class OnnxRunner:
    """Run one ONNX graph, creating the inference session on first use."""

    def __init__(
        self,
        model_path: Path,
        *,
        stage: str,
        providers: list[str] | None = None,
        intra_op_threads: int = 0,
    ) -> None:
        self.model_path = model_path
        self.stage = stage
        self.providers = list(providers or ["CPUExecutionProvider"])
        self.intra_op_threads = intra_op_threads
        self._session: ort.InferenceSession | None = None
        self._lock = threading.Lock()

    @classmethod
    def for_stage(cls, stage: str, model_path: str, config: ModelConfig) -> OnnxRunner:
        return cls(
            Path(model_path).expanduser(),
            stage=stage,
            providers=config.providers,
            intra_op_threads=config.intra_op_threads,
        )

    def _create_session(self) -> ort.InferenceSession:
        if not self.model_path.is_file():
            raise InferenceError(self.stage, f"model file not found: {self.model_path}")

        options = ort.SessionOptions()
        options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        if self.intra_op_threads > 0:
            options.intra_op_num_threads = self.intra_op_threads
        providers = _select_providers(self.providers)

        with timed(
            _LOGGER,
            "session_created",
            stage=self.stage,
            model_path=str(self.model_path),
            providers=providers,
        ):
            try:
                return ort.InferenceSession(
                    str(self.model_path), sess_options=options, providers=providers
                )
            except Exception as exc:
                raise InferenceError(self.stage, f"could not load model: {exc}") from exc

    def session(self) -> ort.InferenceSession:
        """Return the cached inference session, creating it if needed."""

        with self._lock:
            if self._session is None:
                self._session = self._create_session()
            return self._session

    def run(self, inputs: Mapping[str, np.ndarray]) -> dict[str, np.ndarray]:
        session = self.session()
        output_names = [item.name for item in session.get_outputs()]
        try:
            values = session.run(output_names, dict(inputs))
        except Exception as exc:
            raise InferenceError(self.stage, f"inference failed: {exc}") from exc
        return dict(zip(output_names, values))

    def describe(self) -> dict[str, Any]:
        """Describe the graph's declared inputs and outputs."""

        session = self.session()

        def _io(items: list[Any]) -> list[dict[str, Any]]:
            return [
                {"name": item.name, "shape": list(item.shape), "type": item.type}
                for item in items
            ]

        return {
            "stage": self.stage,
            "model_path": str(self.model_path),
            "providers": session.get_providers(),
            "inputs": _io(session.get_inputs()),
            "outputs": _io(session.get_outputs()),
        }
