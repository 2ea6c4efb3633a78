"""Subcommand modules for guardtype.

Provides register_commands() which uses deferred imports to keep
``guardtype --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from guardtype.commands.check import check
    from guardtype.commands.generate import generate
    from guardtype.commands.traits import traits

    cli.add_command(generate)
    cli.add_command(check)
    cli.add_command(traits)
