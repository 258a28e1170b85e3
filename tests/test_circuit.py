"""
Test: Circuit ownership, lookup and the time-stepping loop.

This validates:
- Keyed element/node tables (last write wins, None/empty ids ignored)
- Not-found lookups return None
- Step count policy for duration / dt
- Every element simulated once per step, in insertion order
- Node voltages never written by simulate
- reset() zeroes nodes and, by default, leaves element state alone
"""
import pytest

from pylumped import DomainError
from pylumped.timedomain import Circuit, Element, Node, Resistor, Capacitor, num_steps


class CountingElement(Element):
    """Records every simulate call into a shared log."""

    kind = "Counter"

    def __init__(self, log, *, id=""):
        super().__init__(id=id)
        self.log = log

    def simulate(self, dt):
        self.log.append(self.id)

    @property
    def current(self):
        return 0.0


def build_divider_circuit():
    """5V -- R1 (1kΩ) -- GND, with nodes held by the caller."""
    circuit = Circuit("divider")
    n1 = Node("N1", 5.0)
    gnd = Node("GND", 0.0)
    circuit.add_node(n1)
    circuit.add_node(gnd)

    r1 = Resistor(1000.0, id="R1")
    r1.connect(n1)
    r1.connect(gnd)
    circuit.add_element(r1)
    return circuit, n1, gnd, r1


def test_end_to_end_resistor_current_every_step():
    """Resistor between fixed 5V and 0V nodes reports 5mA at every step."""
    circuit, n1, gnd, r1 = build_divider_circuit()
    seen = []
    steps = circuit.simulate(1e-3, 1e-5, on_step=lambda k, t: seen.append(r1.current))

    assert steps == 100
    assert len(seen) == 100
    assert all(i == pytest.approx(0.005) for i in seen)
    assert n1.voltage == 5.0
    assert gnd.voltage == 0.0


class TestBuilding:

    def test_lookup(self):
        circuit, n1, gnd, r1 = build_divider_circuit()
        assert circuit.get_node("N1") is n1
        assert circuit.get_element("R1") is r1
        assert circuit.get_component("R1") is r1

    def test_lookup_missing_returns_none(self):
        circuit, *_ = build_divider_circuit()
        assert circuit.get_node("nope") is None
        assert circuit.get_element("nope") is None

    def test_duplicate_element_id_replaces(self):
        circuit, *_ = build_divider_circuit()
        r2 = Resistor(50.0, id="R1")
        circuit.add_element(r2)
        assert circuit.get_element("R1") is r2
        assert len(circuit.elements) == 1

    def test_replaced_element_not_listed_at_old_nodes(self):
        circuit = Circuit("c")
        a, b, x, y = (Node(n) for n in ("A", "B", "X", "Y"))
        for node in (a, b, x, y):
            circuit.add_node(node)
        old = Resistor(100.0, id="R1")
        old.connect(a)
        old.connect(b)
        circuit.add_element(old)

        new = Resistor(200.0, id="R1")
        new.connect(x)
        new.connect(y)
        circuit.add_element(new)

        assert circuit.elements_at("A") == []
        assert circuit.elements_at("B") == []
        assert circuit.elements_at("X") == [new]
        assert circuit.elements_at("Y") == [new]

    def test_duplicate_node_id_replaces(self):
        circuit = Circuit("c")
        first, second = Node("N1", 1.0), Node("N1", 2.0)
        circuit.add_node(first)
        circuit.add_node(second)
        assert circuit.get_node("N1") is second
        assert len(circuit.nodes) == 1

    def test_none_and_empty_ids_ignored(self):
        circuit = Circuit("c")
        circuit.add_element(None)
        circuit.add_element(Resistor(10.0))
        circuit.add_node(None)
        circuit.add_node(Node(""))
        assert circuit.elements == ()
        assert circuit.nodes == ()

    def test_elements_at_resolves_through_circuit(self):
        circuit, n1, gnd, r1 = build_divider_circuit()
        c1 = Capacitor(1e-6, id="C1")
        c1.connect(n1)
        c1.connect(gnd)
        circuit.add_element(c1)

        assert circuit.elements_at("N1") == [c1, r1]
        assert circuit.elements_at("missing") == []

    def test_elements_at_skips_elements_not_in_circuit(self):
        circuit, n1, gnd, r1 = build_divider_circuit()
        stray = Resistor(10.0, id="R_stray")
        stray.connect(n1)
        assert "R_stray" in n1.attached
        assert circuit.elements_at("N1") == [r1]


class TestStepCount:

    @pytest.mark.parametrize("duration,dt,expected", [
        (1e-3, 1e-4, 10),
        (0.01, 1e-6, 10000),
        (1e-3, 3e-4, 4),
        (1.0, 0.1, 10),
        (0.3, 0.1, 3),
        (0.0, 1e-6, 0),
        (1e-7, 1e-6, 1),
    ])
    def test_num_steps(self, duration, dt, expected):
        assert num_steps(duration, dt) == expected

    def test_covered_time_reaches_duration(self):
        for duration, dt in [(1e-3, 3e-4), (0.7, 0.2), (5e-6, 1e-6)]:
            n = num_steps(duration, dt)
            assert n * dt >= duration * (1 - 1e-9)
            assert (n - 1) * dt < duration

    def test_simulate_returns_step_count(self):
        circuit, *_ = build_divider_circuit()
        assert circuit.simulate(1e-3, 3e-4) == 4

    @pytest.mark.parametrize("dt", [0.0, -1e-6, float("nan")])
    def test_bad_timestep_rejected(self, dt):
        circuit, *_ = build_divider_circuit()
        with pytest.raises(DomainError):
            circuit.simulate(1e-3, dt)

    def test_negative_duration_rejected(self):
        circuit, *_ = build_divider_circuit()
        with pytest.raises(DomainError):
            circuit.simulate(-1.0, 1e-6)

    def test_step_count_overflow_rejected(self):
        circuit, *_ = build_divider_circuit()
        with pytest.raises(DomainError):
            circuit.simulate(1e300, 1e-300)


class TestStepping:

    def test_each_element_once_per_step_in_insertion_order(self):
        log = []
        circuit = Circuit("order")
        for name in ("Z", "A", "M"):
            circuit.add_element(CountingElement(log, id=name))

        circuit.simulate(3.0, 1.0)
        assert log == ["Z", "A", "M"] * 3

    def test_on_step_times(self):
        circuit, *_ = build_divider_circuit()
        times = []
        circuit.simulate(4e-3, 1e-3, on_step=lambda k, t: times.append((k, t)))
        assert [k for k, _ in times] == [0, 1, 2, 3]
        assert [t for _, t in times] == pytest.approx([1e-3, 2e-3, 3e-3, 4e-3])

    def test_should_stop_ends_run_early(self):
        log = []
        circuit = Circuit("stop")
        circuit.add_element(CountingElement(log, id="X"))
        steps = circuit.simulate(10.0, 1.0, should_stop=lambda: len(log) >= 3)
        assert steps == 3
        assert log == ["X"] * 3

    def test_node_voltages_untouched(self):
        circuit, n1, gnd, _ = build_divider_circuit()
        c1 = Capacitor(1e-6, id="C1")
        c1.connect(n1)
        c1.connect(gnd)
        circuit.add_element(c1)
        circuit.simulate(1e-4, 1e-6)
        assert (n1.voltage, gnd.voltage) == (5.0, 0.0)

    def test_capacitor_history_advances_with_stationary_nodes(self):
        """First step sees the 0 -> 5V jump, later steps see no change."""
        circuit, n1, gnd, _ = build_divider_circuit()
        c1 = Capacitor(1e-6, id="C1")
        c1.connect(n1)
        c1.connect(gnd)
        circuit.add_element(c1)

        currents = []
        circuit.simulate(3e-6, 1e-6, on_step=lambda k, t: currents.append(c1.current))
        assert currents == pytest.approx([5.0, 0.0, 0.0])
        assert c1.charge == pytest.approx(5e-6)

    def test_under_connected_element_is_noop(self):
        circuit = Circuit("loose")
        n1 = Node("N1", 5.0)
        circuit.add_node(n1)
        r1 = Resistor(1000.0, id="R1")
        r1.connect(n1)
        circuit.add_element(r1)
        circuit.simulate(1e-3, 1e-4)
        assert r1.current == 0.0


class TestReset:

    def _charged_rc(self):
        circuit, n1, gnd, r1 = build_divider_circuit()
        c1 = Capacitor(1e-6, id="C1")
        c1.connect(n1)
        c1.connect(gnd)
        circuit.add_element(c1)
        circuit.simulate(1e-5, 1e-6)
        return circuit, n1, gnd, r1, c1

    def test_reset_zeroes_nodes_keeps_element_state(self):
        circuit, n1, gnd, r1, c1 = self._charged_rc()
        charge, r_current = c1.charge, r1.current

        circuit.reset()

        assert n1.voltage == 0.0
        assert gnd.voltage == 0.0
        assert c1.charge == charge
        assert c1.charge == pytest.approx(5e-6)
        assert r1.current == r_current

    def test_reset_with_elements_clears_state(self):
        circuit, n1, gnd, r1, c1 = self._charged_rc()
        circuit.reset(elements=True)
        assert n1.voltage == 0.0
        assert c1.charge == 0.0
        assert c1.voltage == 0.0
        assert r1.current == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
