"""Accelerator interface and the always-unavailable null backend."""

from __future__ import annotations

from typing import Sequence


class Accelerator:
    """
    Optional synchronous numeric service.

    Every operation returns ``(ok, values)``; ``ok`` False means the caller
    must use its own local equations. Nothing in pylumped requires an
    accelerator to be available.
    """

    name: str = "none"

    def __init__(self):
        self._initialized = False

    def initialize(self) -> bool:
        """Acquire the backend. Returns availability; safe to call twice."""
        return False

    def cleanup(self) -> None:
        """Release the backend. Safe to call twice."""
        self._initialized = False

    @property
    def available(self) -> bool:
        return self._initialized

    def device_count(self) -> int:
        return 0

    def device_info(self, device_id: int = 0) -> str:
        return "No accelerator device available"

    def solve_linear_system(
        self,
        matrix: Sequence[Sequence[float]],
        rhs: Sequence[float],
    ) -> tuple[bool, list[float]]:
        """Solve matrix @ x = rhs for a dense square matrix."""
        return False, []

    def simulate_components_batch(
        self,
        voltages: Sequence[float],
        resistances: Sequence[float],
        dt: float,
    ) -> tuple[bool, list[float]]:
        """Ohm's law over aligned voltage/resistance sequences."""
        return False, []

    def __enter__(self) -> Accelerator:
        self.initialize()
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()


class NullAccelerator(Accelerator):
    """Never available. Every call reports failure."""
