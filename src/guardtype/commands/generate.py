"""Command: expand a declaration file into a Python module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from guardtype.commands._options import declarations_argument, examples_option

if TYPE_CHECKING:
    from guardtype.commands._context import AppContext


@click.command()
@examples_option(
    "generate types.toml",
    "generate types.toml -o src/app/types.py",
    "--json generate types.toml",
)
@declarations_argument
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the module here instead of stdout.",
)
@click.pass_obj
def generate(app: AppContext, declarations: Path, output: Path | None) -> None:
    """Generate wrapper types from a declaration file."""
    from guardtype.services.generate import GenerateService

    app.emit(GenerateService(app.settings).generate(declarations, output))
