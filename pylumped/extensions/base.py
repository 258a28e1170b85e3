"""Base class for runtime-loaded element extensions."""

from __future__ import annotations

from typing import Callable, Mapping

from ..timedomain.components import Element

ElementFactory = Callable[[Mapping[str, float]], Element]


class Extension:
    """
    A named bundle of element types that the registry can construct.

    Subclasses register factories in ``__init__`` and may override
    ``_do_initialize`` / ``_do_cleanup``. ``initialize`` and ``cleanup`` are
    idempotent: the hooks only run on a real state change.

    Example:
        class MyElements(Extension):
            def __init__(self):
                super().__init__("MyElements", "1.0.0", "Inductors")
                self.register_type("Inductor", lambda p: Inductor(p.get("inductance", 1e-3)))

        def create_extension():
            return MyElements()

        def destroy_extension(extension):
            pass
    """

    def __init__(self, name: str, version: str, description: str = ""):
        self._name = name
        self._version = version
        self._description = description
        self._initialized = False
        self._factories: dict[str, ElementFactory] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def description(self) -> str:
        return self._description

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> bool:
        if not self._initialized:
            self._initialized = bool(self._do_initialize())
        return self._initialized

    def cleanup(self) -> None:
        if self._initialized:
            self._do_cleanup()
            self._initialized = False

    def _do_initialize(self) -> bool:
        return True

    def _do_cleanup(self) -> None:
        pass

    # ---- element construction ----

    def register_type(self, type_name: str, factory: ElementFactory) -> None:
        self._factories[type_name] = factory

    def supported_types(self) -> tuple[str, ...]:
        return tuple(self._factories)

    def supports(self, type_name: str) -> bool:
        return type_name in self.supported_types()

    def create_element(self, type_name: str, parameters: Mapping[str, float]) -> Element | None:
        """Build an element of type_name, or None if this extension does not know it."""
        factory = self._factories.get(type_name)
        if factory is None:
            return None
        return factory(parameters)

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "uninitialized"
        return f"{type(self).__name__}(name={self._name!r}, version={self._version!r}, {state})"
