"""Built-in runtime profiles for common execution environments."""

from __future__ import annotations

from dataclasses import dataclass

from clickseg.config.schema import SessionConfig
from clickseg.errors import ConfigError


@dataclass(frozen=True, slots=True)
class ProfileSpec:
    """Execution provider and threading defaults for a named profile.

    Profiles never touch model paths; those come from the session config.
    """

    name: str
    description: str
    providers: tuple[str, ...]
    intra_op_threads: int


_PROFILES: dict[str, ProfileSpec] = {
    "cpu": ProfileSpec(
        name="cpu",
        description="CPU execution provider, runtime picks the thread count.",
        providers=("CPUExecutionProvider",),
        intra_op_threads=0,
    ),
    "cpu-single-thread": ProfileSpec(
        name="cpu-single-thread",
        description="One intra-op thread for shared or low-memory CPU hosts.",
        providers=("CPUExecutionProvider",),
        intra_op_threads=1,
    ),
    "cuda": ProfileSpec(
        name="cuda",
        description="CUDA execution with CPU fallback for unsupported ops.",
        providers=("CUDAExecutionProvider", "CPUExecutionProvider"),
        intra_op_threads=0,
    ),
}


def available_profiles() -> dict[str, ProfileSpec]:
    """Return built-in profiles by name."""

    return dict(_PROFILES)


def resolve_profile(name: str) -> ProfileSpec:
    """Resolve one profile by name."""

    key = name.strip().lower()
    profile = _PROFILES.get(key)
    if profile is None:
        known = ", ".join(sorted(_PROFILES))
        raise ConfigError(f"Unknown profile '{name}'. Available profiles: {known}")
    return profile


def apply_profile(config: SessionConfig, profile_name: str) -> ProfileSpec:
    """Apply a profile's providers and thread count onto a SessionConfig."""

    profile = resolve_profile(profile_name)
    config.model.providers = list(profile.providers)
    config.model.intra_op_threads = profile.intra_op_threads
    return profile
