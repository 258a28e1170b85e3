"""Node and Circuit classes for circuit topology and time stepping."""

from __future__ import annotations

from typing import Callable, TYPE_CHECKING

from .._logging import logger
from .simulator import num_steps, run_steps, validate_timing

if TYPE_CHECKING:
    from ..accel import Accelerator
    from .components import Element


class Node:
    """
    A circuit node (electrical connection point).

    ``voltage`` is a plain read/write attribute; nothing checks it. The node
    keeps the ids of attached elements, never the elements themselves; resolve
    them through the owning circuit with ``Circuit.elements_at``.
    """

    def __init__(self, id: str, voltage: float = 0.0):
        self.id = id
        self.voltage = float(voltage)
        self._attached: set[str] = set()

    def set_voltage(self, voltage: float) -> None:
        self.voltage = float(voltage)

    def get_voltage(self) -> float:
        return self.voltage

    def attach(self, element_id: str) -> None:
        if element_id:
            self._attached.add(element_id)

    def detach(self, element_id: str) -> None:
        self._attached.discard(element_id)

    @property
    def attached(self) -> frozenset[str]:
        """Ids of elements connected to this node."""
        return frozenset(self._attached)

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, voltage={self.voltage!r})"


class Circuit:
    """
    Owns elements and nodes by id and drives the time-stepping loop.

    Build imperatively:
        circuit = Circuit("RC")
        n1, gnd = Node("N1", 5.0), Node("GND")
        circuit.add_node(n1)
        circuit.add_node(gnd)

        r1 = Resistor(1000.0, id="R1")
        r1.connect(n1)
        r1.connect(gnd)
        circuit.add_element(r1)

        circuit.simulate(duration=1e-3, dt=1e-6)

    Ids are unique per circuit; adding a second element (or node) with an
    existing id replaces the first. The circuit never writes node voltages
    while simulating, only ``reset`` does.
    """

    def __init__(self, name: str, *, accelerator: Accelerator | None = None):
        self.name = name
        self.accelerator = accelerator
        self._elements: dict[str, Element] = {}
        self._nodes: dict[str, Node] = {}

    # ---- building ----

    def add_element(self, element: Element | None) -> None:
        """Add (or replace) an element keyed by its id. None/empty id is ignored."""
        if element is None or not element.id:
            return
        if element.id in self._elements:
            logger.debug(f"Circuit '{self.name}': replacing element '{element.id}'")
        self._elements[element.id] = element

    add_component = add_element

    def add_node(self, node: Node | None) -> None:
        """Add (or replace) a node keyed by its id. None/empty id is ignored."""
        if node is None or not node.id:
            return
        if node.id in self._nodes:
            logger.debug(f"Circuit '{self.name}': replacing node '{node.id}'")
        self._nodes[node.id] = node

    # ---- lookup ----

    def get_node(self, id: str) -> Node | None:
        return self._nodes.get(id)

    def get_element(self, id: str) -> Element | None:
        return self._elements.get(id)

    get_component = get_element

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    @property
    def elements(self) -> tuple[Element, ...]:
        return tuple(self._elements.values())

    def elements_at(self, node_id: str) -> list[Element]:
        """
        Elements attached to a node, resolved through this circuit's element table.

        An id left behind by a replaced element resolves to the replacement,
        which is only listed if it is itself connected to this node.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return []
        found = []
        for eid in sorted(node.attached):
            element = self._elements.get(eid)
            if element is not None and any(t is node for t in element.terminals):
                found.append(element)
        return found

    # ---- simulation ----

    def simulate(
        self,
        duration: float,
        dt: float,
        *,
        on_step: Callable[[int, float], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> int:
        """
        Run ceil(duration / dt) steps (see ``simulator.num_steps``).

        Every element is simulated exactly once per step, in insertion order.

        Args:
            duration: Simulated time in seconds (>= 0)
            dt: Timestep in seconds (> 0)
            on_step: Called as on_step(step_index, time) after each step
            should_stop: Checked before each step; returning True ends the run early

        Returns:
            Number of steps actually run
        """
        validate_timing(duration, dt)
        n = num_steps(duration, dt)
        logger.info(f"Simulating circuit '{self.name}' for {duration}s with timestep {dt}s ({n} steps)")
        done = run_steps(
            self.elements, dt, n,
            accelerator=self.accelerator,
            on_step=on_step,
            should_stop=should_stop,
        )
        logger.info(f"Circuit '{self.name}': simulation completed after {done} steps")
        return done

    def reset(self, *, elements: bool = False) -> None:
        """
        Zero every node voltage.

        Element state (charge, current, history) is left alone unless
        ``elements=True``.
        """
        for node in self._nodes.values():
            node.voltage = 0.0
        if elements:
            for element in self._elements.values():
                element.reset_state()
        logger.debug(f"Circuit '{self.name}' reset (elements={elements})")

    def __repr__(self) -> str:
        return f"Circuit(name={self.name!r}, nodes={len(self._nodes)}, elements={len(self._elements)})"
