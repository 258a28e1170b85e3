"""pylumped time-domain model.

Nodes carry voltages, elements update their own state from their terminal
voltages every step, and a Circuit owns both and drives the loop.

Elements:
    - Resistor, Capacitor: built in
    - anything else: supplied by extensions (see pylumped.extensions)
"""

from .network import Node, Circuit
from .components import Element, Resistor, Capacitor, require_positive, require_timestep
from .simulator import num_steps, run_steps, step_elements, STEP_REL_TOL

__all__ = [
    # Network building
    "Node",
    "Circuit",
    # Elements
    "Element",
    "Resistor",
    "Capacitor",
    "require_positive",
    "require_timestep",
    # Simulation
    "num_steps",
    "run_steps",
    "step_elements",
    "STEP_REL_TOL",
]
