"""
JAX-backed accelerator.

Dense solves go through jax.numpy.linalg.solve; batched Ohm's law is a jitted
elementwise divide. Runs on whatever device JAX picks (CPU, CUDA, TPU).
"""

from __future__ import annotations

from typing import Sequence

import jax
import jax.numpy as jnp

from .._logging import logger
from .base import Accelerator


@jax.jit
def _ohmic_currents(voltages: jax.Array, resistances: jax.Array) -> jax.Array:
    return voltages / resistances


@jax.jit
def _solve(matrix: jax.Array, rhs: jax.Array) -> jax.Array:
    return jnp.linalg.solve(matrix, rhs)


class JaxAccelerator(Accelerator):
    """Accelerator using the default JAX backend, in float64."""

    name = "jax"

    def initialize(self) -> bool:
        if self._initialized:
            return True
        try:
            jax.config.update("jax_enable_x64", True)
            devices = jax.devices()
        except RuntimeError as e:
            logger.warning(f"JAX accelerator unavailable: {e}")
            return False
        self._initialized = bool(devices)
        if self._initialized:
            logger.info(f"JAX accelerator ready on {jax.default_backend()} ({len(devices)} device(s))")
        return self._initialized

    def device_count(self) -> int:
        if not self._initialized:
            return 0
        return len(jax.devices())

    def device_info(self, device_id: int = 0) -> str:
        if not self._initialized:
            return super().device_info(device_id)
        devices = jax.devices()
        if not 0 <= device_id < len(devices):
            return f"No device with id {device_id}"
        dev = devices[device_id]
        return f"{dev.platform}:{dev.id} {dev.device_kind}"

    def solve_linear_system(
        self,
        matrix: Sequence[Sequence[float]],
        rhs: Sequence[float],
    ) -> tuple[bool, list[float]]:
        if not self._initialized:
            return False, []
        try:
            a = jnp.asarray(matrix, dtype=jnp.float64)
            b = jnp.asarray(rhs, dtype=jnp.float64)
        except (TypeError, ValueError) as e:
            logger.debug(f"solve_linear_system: unusable input ({e})")
            return False, []
        if a.ndim != 2 or a.shape[0] != a.shape[1] or b.shape != (a.shape[0],) or a.shape[0] == 0:
            logger.debug(f"solve_linear_system: bad shapes {a.shape} / {b.shape}")
            return False, []
        x = _solve(a, b)
        # singular systems come back as inf/nan rather than raising
        if not bool(jnp.all(jnp.isfinite(x))):
            return False, []
        return True, [float(v) for v in x]

    def simulate_components_batch(
        self,
        voltages: Sequence[float],
        resistances: Sequence[float],
        dt: float,
    ) -> tuple[bool, list[float]]:
        if not self._initialized or len(voltages) != len(resistances):
            return False, []
        if len(voltages) == 0:
            return True, []
        try:
            v = jnp.asarray(voltages, dtype=jnp.float64)
            r = jnp.asarray(resistances, dtype=jnp.float64)
        except (TypeError, ValueError) as e:
            logger.debug(f"simulate_components_batch: unusable input ({e})")
            return False, []
        if v.ndim != 1 or r.ndim != 1:
            return False, []
        if not bool(jnp.all(r > 0.0)):
            return False, []
        currents = _ohmic_currents(v, r)
        if not bool(jnp.all(jnp.isfinite(currents))):
            return False, []
        return True, [float(i) for i in currents]
