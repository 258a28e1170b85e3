"""pylumped - discrete time-stepping lumped circuit simulator with runtime extensions.

Subpackages:
    - timedomain: Node, Element, Circuit and the fixed-step loop
    - extensions: ExtensionRegistry and the Extension base class
    - accel: optional JAX accelerator for batched updates and dense solves

Usage:
    from pylumped.timedomain import Circuit, Node, Resistor, Capacitor
    from pylumped.extensions import ExtensionRegistry
"""

from .errors import DomainError

__version__ = "0.1.0"
__all__ = ["timedomain", "extensions", "accel", "DomainError", "__version__"]
