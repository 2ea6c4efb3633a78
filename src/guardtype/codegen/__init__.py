"""Code generation — Jinja2 templates rendered into Python source."""

from guardtype.codegen.generator import GeneratedUnit, generate, render_module

__all__ = ["GeneratedUnit", "generate", "render_module"]
