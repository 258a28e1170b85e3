"""Optional numeric accelerator.

Usage:
    from pylumped.accel import get_accelerator

    accel = get_accelerator()          # honours SimConfig.accelerator
    circuit = Circuit("big", accelerator=accel)
"""

from __future__ import annotations

from ..config import SimConfig, get_config
from .._logging import logger
from .base import Accelerator, NullAccelerator
from .jax_backend import JaxAccelerator


def get_accelerator(config: SimConfig | None = None) -> Accelerator:
    """
    Return an initialized JaxAccelerator when enabled and usable, else a NullAccelerator.
    """
    config = config or get_config()
    if config.accelerator:
        accel = JaxAccelerator()
        if accel.initialize():
            return accel
        logger.warning("Accelerator requested but unavailable, using local equations")
    return NullAccelerator()


__all__ = [
    "Accelerator",
    "NullAccelerator",
    "JaxAccelerator",
    "get_accelerator",
]
