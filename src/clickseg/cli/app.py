"""Tyro CLI application entrypoint."""

from __future__ import annotations

from typing import Annotated

import tyro

from clickseg.cli import (
    commands_inspect,
    commands_normalize,
    commands_profiles,
    commands_segment,
)
from clickseg.errors import ClickSegError
from clickseg.observability.logging import configure_logging


TopLevelCommand = Annotated[
    commands_segment.SegmentCommand,
    tyro.conf.subcommand(name="segment"),
] | Annotated[
    commands_normalize.NormalizeCommand,
    tyro.conf.subcommand(name="normalize"),
] | Annotated[
    commands_inspect.InspectModelsCommand,
    tyro.conf.subcommand(name="inspect-models"),
] | Annotated[
    commands_profiles.ProfilesCommand,
    tyro.conf.subcommand(name="profiles"),
]


def dispatch(command: TopLevelCommand) -> None:
    """Dispatch parsed top-level command object."""

    if isinstance(command, commands_segment.SegmentCommand):
        commands_segment.execute(command)
        return
    if isinstance(command, commands_normalize.NormalizeCommand):
        commands_normalize.execute(command)
        return
    if isinstance(command, commands_inspect.InspectModelsCommand):
        commands_inspect.execute(command)
        return
    if isinstance(command, commands_profiles.ProfilesCommand):
        commands_profiles.execute(command)
        return
    raise TypeError(f"Unsupported command type: {type(command).__name__}")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run requested command."""

    configure_logging()
    command = tyro.cli(TopLevelCommand, args=argv)
    try:
        dispatch(command)
    except ClickSegError as exc:
        raise SystemExit(f"error: {exc}") from exc
