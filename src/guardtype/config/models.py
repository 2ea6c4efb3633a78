"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, guardtype.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from guardtype.domain.meta import DefaultPolicy

# --- guardtype.toml sections ---


class GeneratorConfig(BaseModel):
    """[generator] section."""

    model_config = {"frozen": True}

    header: bool = True
    compile_check: bool = True
    default_policy: DefaultPolicy = DefaultPolicy.TRUST
    template_dir: Path | None = None
