"""
Example: loading element extensions at runtime

Loads a single extension module file (default: the BasicElements module,
pylumped/extensions/basic.py), then builds an inductor and a diode by type
name.

Elements used: Inductor, Diode (from the BasicElements extension)
"""
import argparse
from pathlib import Path

import pylumped.extensions.basic
from pylumped.extensions import ExtensionRegistry
from pylumped.timedomain import Circuit, Node


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--extension", type=Path, default=Path(pylumped.extensions.basic.__file__))
    args = parser.parse_args()

    with ExtensionRegistry() as registry:
        if not registry.load(args.extension):
            raise SystemExit(f"could not load {args.extension}")
        print("Loaded:", ", ".join(registry.loaded_extensions()))
        print("Element types:", ", ".join(sorted(registry.supported_types())))

        l1 = registry.create_element("Inductor", {"inductance": 1e-3}, id="L1")
        d1 = registry.create_element("Diode", {"forward_voltage": 0.6}, id="D1")
        if l1 is None or d1 is None:
            raise SystemExit("extension does not provide Inductor and Diode")

        circuit = Circuit("Extension demo")
        n1, gnd = Node("N1", 0.8), Node("GND")
        circuit.add_node(n1)
        circuit.add_node(gnd)
        for element in (l1, d1):
            element.connect(n1)
            element.connect(gnd)
            circuit.add_element(element)

        circuit.simulate(1e-4, 1e-6)
        print(f"L1 current after 100µs: {l1.current:.6g} A")
        print(f"D1 current at 0.8V: {d1.current:.6g} A")


if __name__ == "__main__":
    main()
