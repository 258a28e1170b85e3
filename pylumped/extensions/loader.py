"""
Opening, symbol lookup and release of extension modules.

This is the only place that executes code from extension files. An extension
module is any file the import system can load: a Python source module or a
compiled extension module for the running interpreter.

Source modules get a private, unique module name per load, so the same file
can be loaded twice and each load is released independently. Compiled modules
must be imported under their own name (their init symbol depends on it), and
CPython never unmaps them; releasing one only drops the module object.
"""

from __future__ import annotations

import importlib.util
import itertools
import re
import sys
from importlib.machinery import EXTENSION_SUFFIXES, SOURCE_SUFFIXES
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

from .._logging import logger

# Exported entry points every extension module must define
CREATE_SYMBOL = "create_extension"
DESTROY_SYMBOL = "destroy_extension"

# Longest first so ".cpython-312-x86_64-linux-gnu.so" wins over ".so"
LIBRARY_SUFFIXES: tuple[str, ...] = tuple(
    sorted(set(EXTENSION_SUFFIXES) | set(SOURCE_SUFFIXES), key=len, reverse=True)
)

_load_counter = itertools.count()


def is_library_file(path: Path) -> bool:
    """True if the file name ends in a loadable module suffix."""
    return path.name.endswith(LIBRARY_SUFFIXES)


def _is_compiled(path: Path) -> bool:
    return path.name.endswith(tuple(EXTENSION_SUFFIXES))


def _module_name_for(path: Path) -> str:
    if _is_compiled(path):
        return path.name.split(".", 1)[0]
    stem = re.sub(r"\W", "_", path.name.split(".", 1)[0])
    return f"_pylumped_ext_{next(_load_counter)}_{stem}"


class LibraryHandle:
    """An opened extension module. ``close`` releases it and is idempotent."""

    def __init__(self, path: Path, module: ModuleType, module_name: str):
        self.path = path
        self.module_name = module_name
        self._module: ModuleType | None = module

    @property
    def closed(self) -> bool:
        return self._module is None

    def symbol(self, name: str) -> Callable[..., Any] | None:
        """Resolve an exported callable, or None if absent or not callable."""
        if self._module is None:
            return None
        obj = getattr(self._module, name, None)
        return obj if callable(obj) else None

    def close(self) -> None:
        if self._module is None:
            return
        if sys.modules.get(self.module_name) is self._module:
            del sys.modules[self.module_name]
        self._module = None
        logger.debug(f"Released extension module {self.path}")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"LibraryHandle({str(self.path)!r}, {state})"


def open_library(path: str | Path) -> LibraryHandle | None:
    """
    Load and execute an extension module file.

    Returns None (after logging why) when the file is missing, is not a
    loadable module, or raises while executing.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning(f"Failed to load extension library: {path} (no such file)")
        return None

    module_name = _module_name_for(path)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning(f"Failed to load extension library: {path} (not a loadable module)")
        return None

    module = None
    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as e:
        if module is not None and sys.modules.get(module_name) is module:
            del sys.modules[module_name]
        logger.warning(f"Failed to load extension library: {path} ({type(e).__name__}: {e})")
        return None

    logger.debug(f"Opened extension module {path} as {module_name}")
    return LibraryHandle(path, module, module_name)
