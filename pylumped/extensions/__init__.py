"""Runtime-loaded element extensions.

An extension module exports ``create_extension()`` returning an Extension
and ``destroy_extension(extension)``. ExtensionRegistry discovers such
modules in a directory, loads them, and builds elements by type name.
"""

from .base import Extension, ElementFactory
from .loader import (
    CREATE_SYMBOL,
    DESTROY_SYMBOL,
    LIBRARY_SUFFIXES,
    LibraryHandle,
    is_library_file,
    open_library,
)
from .registry import ExtensionRegistry, LoadedExtension

__all__ = [
    "Extension",
    "ElementFactory",
    "ExtensionRegistry",
    "LoadedExtension",
    "LibraryHandle",
    "open_library",
    "is_library_file",
    "CREATE_SYMBOL",
    "DESTROY_SYMBOL",
    "LIBRARY_SUFFIXES",
]
