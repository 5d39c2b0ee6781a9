"""`clickseg profiles` command."""

from __future__ import annotations

from dataclasses import dataclass

from clickseg.config.profiles import available_profiles


@dataclass(slots=True)
class ProfilesCommand:
    """List built-in runtime profiles."""


def execute(command: ProfilesCommand) -> None:
    for name, profile in sorted(available_profiles().items()):
        providers = ",".join(profile.providers)
        print(f"{name}: {profile.description} providers={providers} threads={profile.intra_op_threads}")
