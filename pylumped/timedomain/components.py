"""Circuit elements: the extensible Element interface and built-in R and C."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..errors import DomainError

if TYPE_CHECKING:
    from .network import Node


def require_positive(value: float, what: str) -> float:
    """Return value as float, or raise DomainError if it is not finite and > 0."""
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise DomainError(f"{what} must be finite and positive, got {value!r}")
    return value


def require_timestep(dt: float) -> float:
    """Return dt as float, or raise DomainError for a zero/negative/non-finite step."""
    return require_positive(dt, "timestep")


class Element(ABC):
    """
    Base class for every circuit element, built-in or extension-supplied.

    An element reads the voltages of its terminal nodes and advances its own
    state; it never writes node voltages. Node voltages are driven from the
    outside (by the caller, or a source).

    Subclasses set ``kind`` and ``required_terminals`` and implement
    ``simulate`` and ``current``.

    Example:
        r1 = Resistor(1000.0, id="R1")
        r1.connect(n1)
        r1.connect(gnd)
        r1.simulate(1e-6)
        r1.current  # (n1.voltage - gnd.voltage) / 1000
    """

    kind: str = "Element"
    required_terminals: int = 2

    def __init__(self, *, id: str = ""):
        self._id = id
        self.terminals: list[Node] = []

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        # keep node back-references keyed on the current id
        for node in self.terminals:
            node.detach(self._id)
            node.attach(value)
        self._id = value

    def connect(self, node: Node) -> None:
        """Append node as the next terminal and register the back-reference."""
        self.terminals.append(node)
        node.attach(self._id)

    @property
    def connected(self) -> bool:
        """True once the element has at least ``required_terminals`` terminals."""
        return len(self.terminals) >= self.required_terminals

    def voltage_across(self) -> float:
        """V(terminal 0) - V(terminal 1)."""
        return self.terminals[0].voltage - self.terminals[1].voltage

    @abstractmethod
    def simulate(self, dt: float) -> None:
        """Advance internal state by one step of dt seconds."""

    @property
    @abstractmethod
    def current(self) -> float:
        """Most recently computed current in Amperes."""

    def reset_state(self) -> None:
        """Restore dynamic state to its construction-time values."""

    def __repr__(self) -> str:
        terms = ", ".join(n.id for n in self.terminals)
        return f"{type(self).__name__}(id={self._id!r}, terminals=[{terms}])"


class Resistor(Element):
    """Ohmic resistor: I = (V0 - V1) / R. Memoryless."""

    kind = "Resistor"

    def __init__(self, resistance: float, *, id: str = ""):
        super().__init__(id=id)
        self.resistance = require_positive(resistance, "resistance")
        self._current = 0.0

    def simulate(self, dt: float) -> None:
        if not self.connected:
            return
        self._current = self.voltage_across() / self.resistance

    def record_current(self, current: float) -> None:
        """Store a current computed outside the element (batched update)."""
        self._current = float(current)

    @property
    def current(self) -> float:
        return self._current

    def reset_state(self) -> None:
        self._current = 0.0


class Capacitor(Element):
    """
    Ideal capacitor integrated with backward differences.

    Per step:
        I = C * (V - V_prev) / dt
        Q += I * dt
        V_prev = V
    """

    kind = "Capacitor"

    def __init__(self, capacitance: float, *, id: str = ""):
        super().__init__(id=id)
        self.capacitance = require_positive(capacitance, "capacitance")
        self.charge = 0.0
        self.voltage = 0.0  # voltage seen at the previous step
        self._current = 0.0

    def simulate(self, dt: float) -> None:
        dt = require_timestep(dt)
        if not self.connected:
            return
        v = self.voltage_across()
        self._current = self.capacitance * (v - self.voltage) / dt
        self.charge += self._current * dt
        self.voltage = v

    @property
    def current(self) -> float:
        return self._current

    def reset_state(self) -> None:
        self.charge = 0.0
        self.voltage = 0.0
        self._current = 0.0
