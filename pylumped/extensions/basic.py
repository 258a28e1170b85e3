"""
Basic element extension: Inductor and Diode.

This module is a complete extension in the loadable form, so it can be
dropped into an extension directory or loaded by path:

    registry.load(pylumped.extensions.basic.__file__)

Only absolute imports are used here; the registry executes extension files
outside the pylumped package namespace.
"""

from __future__ import annotations

import math
from typing import Mapping

from pylumped._logging import logger
from pylumped.extensions.base import Extension
from pylumped.timedomain.components import Element, require_positive, require_timestep

# Exponent cap for the diode law; continued linearly above it
DIODE_MAX_EXPONENT = 40.0


class Inductor(Element):
    """
    Ideal inductor, forward Euler on L di/dt = v:

        I += (V0 - V1) * dt / L
    """

    kind = "Inductor"

    def __init__(self, inductance: float, *, id: str = ""):
        super().__init__(id=id)
        self.inductance = require_positive(inductance, "inductance")
        self.voltage = 0.0
        self._current = 0.0

    def simulate(self, dt: float) -> None:
        dt = require_timestep(dt)
        if not self.connected:
            return
        v = self.voltage_across()
        self._current += v * dt / self.inductance
        self.voltage = v

    @property
    def current(self) -> float:
        return self._current

    def reset_state(self) -> None:
        self.voltage = 0.0
        self._current = 0.0


class Diode(Element):
    """
    Piecewise diode.

    Below the forward threshold a constant reverse leakage flows:
        I = -leakage_current
    At or above it, the Shockley law, never below the leakage level:
        I = max(-leakage_current, Is * (exp(V / Vt) - 1))

    The exponent is capped at DIODE_MAX_EXPONENT and the curve continued
    along its tangent, so I stays finite and non-decreasing for any V.

    Attributes:
        forward_voltage: Threshold in Volts (default 0.7)
        saturation_current: Is in Amperes (default 1e-12)
        thermal_voltage: Vt in Volts (default 0.026)
        leakage_current: Reverse leakage magnitude in Amperes (default 1e-12)
    """

    kind = "Diode"

    def __init__(
        self,
        forward_voltage: float = 0.7,
        *,
        saturation_current: float = 1e-12,
        thermal_voltage: float = 0.026,
        leakage_current: float = 1e-12,
        id: str = "",
    ):
        super().__init__(id=id)
        self.forward_voltage = float(forward_voltage)
        self.saturation_current = require_positive(saturation_current, "saturation current")
        self.thermal_voltage = require_positive(thermal_voltage, "thermal voltage")
        self.leakage_current = abs(float(leakage_current))
        self._current = 0.0

    def iv(self, v: float) -> float:
        """Current for a given anode-cathode voltage."""
        if v < self.forward_voltage:
            return -self.leakage_current
        x = v / self.thermal_voltage
        if x <= DIODE_MAX_EXPONENT:
            return max(-self.leakage_current, self.saturation_current * math.expm1(x))
        e_max = math.exp(DIODE_MAX_EXPONENT)
        return self.saturation_current * (e_max * (1.0 + x - DIODE_MAX_EXPONENT) - 1.0)

    def simulate(self, dt: float) -> None:
        if not self.connected:
            return
        self._current = self.iv(self.voltage_across())

    @property
    def current(self) -> float:
        return self._current

    def reset_state(self) -> None:
        self._current = 0.0


def _make_inductor(parameters: Mapping[str, float]) -> Inductor:
    return Inductor(parameters.get("inductance", 1e-3))


def _make_diode(parameters: Mapping[str, float]) -> Diode:
    return Diode(
        parameters.get("forward_voltage", 0.7),
        saturation_current=parameters.get("saturation_current", 1e-12),
        thermal_voltage=parameters.get("thermal_voltage", 0.026),
        leakage_current=parameters.get("leakage_current", 1e-12),
    )


class BasicElements(Extension):
    """Inductor and Diode."""

    def __init__(self):
        super().__init__(
            "BasicElements",
            "1.0.0",
            "Basic extension with inductor and diode elements",
        )
        self.register_type("Inductor", _make_inductor)
        self.register_type("Diode", _make_diode)

    def _do_initialize(self) -> bool:
        logger.debug(f"{self.name} initialized with elements: {', '.join(self.supported_types())}")
        return True

    def _do_cleanup(self) -> None:
        logger.debug(f"{self.name} cleaned up")


def create_extension() -> BasicElements:
    return BasicElements()


def destroy_extension(extension: BasicElements) -> None:
    extension.cleanup()
