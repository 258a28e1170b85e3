"""
Example: RC circuit driven from fixed node voltages

A 5V node feeds a 1kΩ resistor into a 1µF capacitor to ground. Node
voltages are held by the caller (no solver), so the resistor carries
(V_N1 - V_N2) / R every step and the capacitor sees the initial jump once.

Elements used: Resistor, Capacitor
"""
import argparse

from pylumped._logging import enable_debug_logging
from pylumped.accel import get_accelerator
from pylumped.timedomain import Circuit, Node, Resistor, Capacitor


def build_rc(accelerator=None):
    """Build the demo circuit.

    Circuit:
        N1 (5V) ---[R1 1kΩ]--- N2 ---[C1 1µF]--- GND
    """
    circuit = Circuit("Demo RC Circuit", accelerator=accelerator)
    n1, n2, gnd = Node("N1"), Node("N2"), Node("GND")
    for node in (n1, n2, gnd):
        circuit.add_node(node)

    r1 = Resistor(1000.0, id="R1")
    r1.connect(n1)
    r1.connect(n2)

    c1 = Capacitor(1e-6, id="C1")
    c1.connect(n2)
    c1.connect(gnd)

    circuit.add_element(r1)
    circuit.add_element(c1)
    return circuit


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--duration", type=float, default=0.01)
    parser.add_argument("--dt", type=float, default=1e-6)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        enable_debug_logging()

    circuit = build_rc(get_accelerator())
    circuit.get_node("N1").voltage = 5.0
    circuit.get_node("N2").voltage = 2.5

    steps = circuit.simulate(args.duration, args.dt)

    r1 = circuit.get_element("R1")
    c1 = circuit.get_element("C1")
    print(f"{steps} steps")
    print(f"R1 current: {r1.current:.6g} A")
    print(f"C1 voltage: {c1.voltage:.6g} V, charge: {c1.charge:.6g} C")


if __name__ == "__main__":
    main()
