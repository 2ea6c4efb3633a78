"""BaseService — shared foundation for guardtype services.

Every service receives the resolved :class:`GuardtypeSettings` at
construction time and builds its template environment from them.
"""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING, Any

from guardtype.codegen.templates import build_template_environment

if TYPE_CHECKING:
    from jinja2 import Environment

    from guardtype.config.settings import GuardtypeSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class GenerateService(BaseService):
            def generate(self, path: Path) -> ServiceResult:
                ...
    """

    def __init__(self, settings: GuardtypeSettings) -> None:
        self._settings = settings

    @cached_property
    def _env(self) -> Environment:
        template_dir = self._settings.template_dir()
        if template_dir is not None:
            logger.debug("Using template overrides from %s", template_dir)
        return build_template_environment(template_dir=template_dir)

    def _run_meta(self) -> dict[str, Any]:
        """Settings that shaped a run, reported in ``ServiceResult.meta``."""
        config = self._settings.config_path
        generator = self._settings.generator
        return {
            "config": str(config) if config is not None else None,
            "default_policy": generator.default_policy.value,
            "compile_check": generator.compile_check,
        }
