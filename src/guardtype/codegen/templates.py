"""Shared Jinja2 template loading with per-project override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
)


def build_template_environment(
    group: str = "codegen",
    *,
    template_dir: Path | None = None,
) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Overrides are looked up in *template_dir* (``[generator] template_dir``).
    Both a namespaced directory (for example ``<template_dir>/codegen/``)
    and the directory root are searched, so a single overridden template can
    be dropped in without recreating the whole layout.
    """

    loaders: list[BaseLoader] = []
    if template_dir is not None:
        loaders.append(FileSystemLoader([str(template_dir / group), str(template_dir)]))

    loaders.append(PackageLoader("guardtype", f"templates/{group}"))
    env = Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.filters["pyrepr"] = repr
    return env
