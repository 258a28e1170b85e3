"""
Extension registry: discovery, loading, lifecycle and element dispatch.

A registry is an ordinary object; create one, use it, close it:

    with ExtensionRegistry() as registry:
        for path in registry.discover("extensions"):
            registry.load(path)
        l1 = registry.create_element("Inductor", {"inductance": 1e-3}, id="L1")

Per extension the lifecycle is

    Unloaded -> Loaded (uninitialized) -> Initialized -> cleanup -> Unloaded

and each module handle is released exactly once, on unload, on replacement
by a same-named extension, or on any failed step of ``load``.
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Any, Callable, Mapping, NamedTuple

from ..config import SimConfig, get_config
from .._logging import logger
from ..errors import DomainError
from ..timedomain.components import Element
from .base import Extension
from .loader import (
    CREATE_SYMBOL,
    DESTROY_SYMBOL,
    LibraryHandle,
    is_library_file,
    open_library,
)


class LoadedExtension(NamedTuple):
    """Registry entry: the live extension plus what is needed to release it."""
    extension: Extension
    handle: LibraryHandle
    destroy: Callable[[Any], None]


def _destroy_quietly(destroy: Callable[[Any], None], extension: Any) -> None:
    try:
        destroy(extension)
    except Exception as e:
        logger.warning(f"{DESTROY_SYMBOL} raised for {extension!r}: {e}")


def _cleanup_quietly(extension: Extension) -> None:
    try:
        extension.cleanup()
    except Exception as e:
        logger.warning(f"Cleanup of extension '{extension.name}' raised: {e}")


class ExtensionRegistry:
    """
    Tracks loaded extensions by name and routes element construction to them.

    Args:
        config: Defaults for ``extension_dir`` and ``replace_duplicates``
            (process config when omitted)
        replace_duplicates: Override ``config.replace_duplicates``. When True a
            newly loaded extension replaces a loaded one with the same name;
            when False the newcomer is rejected.
    """

    def __init__(self, config: SimConfig | None = None, *, replace_duplicates: bool | None = None):
        self.config = config or get_config()
        self.replace_duplicates = (
            self.config.replace_duplicates if replace_duplicates is None else replace_duplicates
        )
        self._entries: dict[str, LoadedExtension] = {}

    # ---- discovery ----

    def discover(self, directory: str | Path | None = None) -> list[Path]:
        """
        List loadable module files directly inside directory (not recursive).

        A missing, unreadable or empty directory gives an empty list.
        """
        directory = Path(directory if directory is not None else self.config.extension_dir)
        found: list[Path] = []
        try:
            if not directory.is_dir():
                return found
            for entry in directory.iterdir():
                if entry.is_file() and is_library_file(entry):
                    found.append(entry)
        except OSError as e:
            logger.warning(f"Error discovering extensions in {directory}: {e}")
            return []
        found.sort()
        logger.debug(f"Discovered {len(found)} extension module(s) in {directory}")
        return found

    # ---- loading ----

    def load(self, path: str | Path) -> bool:
        """
        Load one extension module, create its extension and initialize it.

        Returns False, with nothing left loaded, if the module cannot be
        opened, lacks ``create_extension``/``destroy_extension``, the factory
        returns no Extension, or initialization fails.
        """
        logger.info(f"Loading extension: {path}")
        handle = open_library(path)
        if handle is None:
            return False

        with ExitStack() as unwind:
            unwind.callback(handle.close)

            create = handle.symbol(CREATE_SYMBOL)
            destroy = handle.symbol(DESTROY_SYMBOL)
            missing = [s for s, f in ((CREATE_SYMBOL, create), (DESTROY_SYMBOL, destroy)) if f is None]
            if missing:
                logger.warning(f"Extension does not export {', '.join(missing)}: {path}")
                return False

            try:
                extension = create()
            except Exception as e:
                logger.warning(f"{CREATE_SYMBOL} raised in {path}: {e}")
                return False
            if extension is None:
                logger.warning(f"Failed to create extension instance: {path}")
                return False
            unwind.callback(_destroy_quietly, destroy, extension)
            if not isinstance(extension, Extension):
                logger.warning(f"{CREATE_SYMBOL} in {path} returned {type(extension).__name__}, not an Extension")
                return False

            try:
                ok = extension.initialize()
            except Exception as e:
                logger.warning(f"Initialization of extension '{extension.name}' raised: {e}")
                ok = False
            if not ok:
                logger.warning(f"Failed to initialize extension: {extension.name}")
                return False
            unwind.callback(_cleanup_quietly, extension)

            name = extension.name
            previous = self._entries.get(name)
            if previous is not None:
                if not self.replace_duplicates:
                    logger.warning(f"Extension '{name}' is already loaded; rejecting {path}")
                    return False
                logger.info(f"Extension '{name}' from {previous.handle.path} replaced by {path}")
                del self._entries[name]
                self._release(previous)

            self._entries[name] = LoadedExtension(extension, handle, destroy)
            # ownership has moved to the registry entry
            unwind.pop_all()

        logger.info(f"Successfully loaded extension: {name} v{extension.version}")
        return True

    def load_directory(self, directory: str | Path | None = None) -> int:
        """Discover and load every extension module in directory. Returns the number loaded."""
        return sum(1 for path in self.discover(directory) if self.load(path))

    # ---- unloading ----

    def _release(self, entry: LoadedExtension) -> None:
        _cleanup_quietly(entry.extension)
        _destroy_quietly(entry.destroy, entry.extension)
        entry.handle.close()

    def unload(self, name: str) -> bool:
        """Clean up, destroy and release the named extension. Unknown name returns False."""
        entry = self._entries.pop(name, None)
        if entry is None:
            return False
        self._release(entry)
        logger.info(f"Unloaded extension: {name}")
        return True

    def unload_all(self) -> None:
        for name in list(self._entries):
            self.unload(name)

    close = unload_all

    def __enter__(self) -> ExtensionRegistry:
        return self

    def __exit__(self, *exc) -> None:
        self.unload_all()

    # ---- queries ----

    def loaded_extensions(self) -> list[str]:
        return list(self._entries)

    def get_extension(self, name: str) -> Extension | None:
        entry = self._entries.get(name)
        return entry.extension if entry is not None else None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def supported_types(self) -> set[str]:
        """Union of the element types of every loaded extension."""
        types: set[str] = set()
        for entry in self._entries.values():
            types.update(entry.extension.supported_types())
        return types

    # ---- construction ----

    def create_element(
        self,
        type_name: str,
        parameters: Mapping[str, float] | None = None,
        *,
        id: str | None = None,
    ) -> Element | None:
        """
        Build an element through the first loaded extension that supports type_name.

        Extensions are tried in load order. Parameters are passed through
        untouched; each extension picks the keys it knows and defaults the
        rest. A DomainError (invalid physical value) propagates; any other
        error from an extension is logged and the next one is tried.

        Returns:
            The new element, or None if no extension could build it
        """
        parameters = dict(parameters or {})
        for name, entry in list(self._entries.items()):
            ext = entry.extension
            if not ext.supports(type_name):
                continue
            try:
                element = ext.create_element(type_name, parameters)
            except DomainError:
                raise
            except Exception as e:
                logger.warning(f"Extension '{name}' failed to create '{type_name}': {e}")
                continue
            if element is not None:
                if id is not None:
                    element.id = id
                logger.debug(f"Created element '{type_name}' using extension '{name}'")
                return element

        logger.warning(f"No extension found to create element type: {type_name}")
        return None
