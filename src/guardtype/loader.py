"""Load generated source as a module object at runtime."""

from __future__ import annotations

import importlib.abc
import importlib.util
import sys
import types

DEFAULT_MODULE_NAME = "guardtype_generated"


class GeneratedSourceLoader(importlib.abc.Loader):
    """Loader for generated source held in memory."""

    def __init__(self, source: str, filename: str) -> None:
        self._source = source
        self._filename = filename

    def get_source(self, fullname: str) -> str:
        return self._source

    def exec_module(self, module: types.ModuleType) -> None:
        exec(compile(self._source, self._filename, "exec"), module.__dict__)


def materialize(source: str, module_name: str = DEFAULT_MODULE_NAME) -> types.ModuleType:
    """Execute generated *source* as module *module_name* and return it.

    The module is registered in :data:`sys.modules` before its body runs so
    that annotations and pickling resolve against it. It stays registered
    until :func:`release` is called; a module whose body raises is removed.
    """
    loader = GeneratedSourceLoader(source, f"<{module_name}>")
    spec = importlib.util.spec_from_loader(module_name, loader, origin=f"<{module_name}>")
    if spec is None:
        raise ImportError(f"Cannot create a module spec for {module_name}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def release(module_name: str) -> bool:
    """Remove a materialized module from :data:`sys.modules`.

    Returns True when the module was registered.
    """
    return sys.modules.pop(module_name, None) is not None
