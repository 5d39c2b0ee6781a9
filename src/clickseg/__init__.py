"""clickseg package entrypoint."""

from clickseg.cli.app import main as _cli_main


def main() -> None:
    """Run the clickseg CLI."""
    _cli_main()
