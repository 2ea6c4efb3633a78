"""Decorators shared by guardtype commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])

declarations_argument = click.argument(
    "declarations",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def examples_option(*lines: str) -> Callable[[F], F]:
    """Add an eager ``--examples`` flag that prints *lines* and exits.

    Every line is an invocation of ``guardtype``; they are printed indented
    under the command path, leaving ``--help`` short.
    """

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in lines:
            click.echo(f"  guardtype {line}")
        ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )
