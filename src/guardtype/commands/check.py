"""Command: validate a declaration file without writing output."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from guardtype.commands._options import declarations_argument, examples_option

if TYPE_CHECKING:
    from guardtype.commands._context import AppContext


@click.command()
@examples_option("check types.toml", "-v check types.toml", "--json check types.toml")
@declarations_argument
@click.pass_obj
def check(app: AppContext, declarations: Path) -> None:
    """Run every declaration through the pipeline and report errors."""
    from guardtype.services.generate import GenerateService

    app.emit(GenerateService(app.settings).check(declarations))
