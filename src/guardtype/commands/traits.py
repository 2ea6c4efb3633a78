"""Command: show the trait compatibility policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from guardtype.commands._options import examples_option
from guardtype.domain.types import Family

if TYPE_CHECKING:
    from guardtype.commands._context import AppContext


@click.command()
@examples_option("traits", "traits --family float")
@click.option(
    "--family",
    type=click.Choice([f.value for f in Family]),
    default=None,
    help="Only show one family.",
)
@click.pass_obj
def traits(app: AppContext, family: str | None) -> None:
    """List derivable traits and their preconditions per family."""
    from guardtype.services.policy import PolicyService

    app.emit(PolicyService(app.settings).describe(family))
