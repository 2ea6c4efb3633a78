"""GenerateService — declaration file to generated module.

Runs every declaration through the dispatcher, optionally compile-checks the
rendered module, and writes it out. The first pipeline error aborts the run;
nothing is written on failure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from guardtype.dispatch import Declaration, expand_all
from guardtype.domain.errors import GenerationError, GuardTypeError
from guardtype.domain.spans import Span
from guardtype.frontend.declarations import load_declarations
from guardtype.services.base import BaseService
from guardtype.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def compile_check(source: str, filename: str) -> None:
    """Byte-compile *source*, mapping syntax errors to GenerationError."""
    try:
        compile(source, filename, "exec")
    except SyntaxError as exc:
        span = Span(exc.lineno or 1, exc.offset or 1, filename)
        raise GenerationError(f"Generated source does not compile: {exc.msg}", span) from exc


class GenerateService(BaseService):
    """Expands declaration files into Python source."""

    def _render(self, path: Path) -> tuple[list[Declaration], str, list[Any]]:
        declarations = load_declarations(path)
        generator = self._settings.generator
        source, units = expand_all(
            declarations,
            header=generator.header,
            default_policy=generator.default_policy,
            env=self._env,
        )
        if generator.compile_check:
            compile_check(source, f"<generated from {path.name}>")
        return declarations, source, units

    def generate(self, path: Path, output: Path | None = None) -> ServiceResult:
        """Generate a module from *path*; write it to *output* when given."""
        op = "generate"
        try:
            declarations, source, units = self._render(path)
        except GuardTypeError as exc:
            logger.debug("Generation failed for %s: %s", path, exc)
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))

        warnings: list[str] = []
        if not declarations:
            warnings.append(f"No [[newtype]] tables found in {path}")

        if output is not None:
            try:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(source, encoding="utf-8")
            except OSError as exc:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code="WRITE_FAILED",
                        message=f"Cannot write {output}: {exc.strerror or exc}",
                    ),
                )
            logger.debug("Wrote %d types to %s", len(units), output)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(output) if output is not None else None,
                "count": len(units),
                "types": [unit.name for unit in units],
                "source": source,
            },
            warnings=warnings,
            meta=self._run_meta(),
        )

    def check(self, path: Path) -> ServiceResult:
        """Run the full pipeline on *path* without writing anything."""
        op = "check"
        try:
            declarations, _source, units = self._render(path)
        except GuardTypeError as exc:
            logger.debug("Check failed for %s: %s", path, exc)
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))

        types: list[dict[str, Any]] = []
        for declaration, unit in zip(declarations, units, strict=True):
            meta = declaration.meta
            types.append(
                {
                    "name": unit.name,
                    "inner": meta.inner_type.label,
                    "family": meta.inner_type.family.value,
                    "visibility": meta.vis.value,
                    "traits": [spanned.item for spanned in meta.derive_traits],
                    "exports": list(unit.exports),
                }
            )
        warnings: list[str] = []
        if not declarations:
            warnings.append(f"No [[newtype]] tables found in {path}")
        return ServiceResult(
            ok=True,
            op=op,
            data={"types": types, "count": len(types)},
            warnings=warnings,
            meta=self._run_meta(),
        )
