"""
Fixed-step time loop.

There is no global equation system: each step every element updates from its
own terminal voltages. Resistors are memoryless and read-only with respect to
nodes, so when an accelerator is available their currents for a step are
computed in one batched call; anything that fails there falls back to
``Resistor.simulate``.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence, TYPE_CHECKING

from .._logging import logger
from ..errors import DomainError
from .components import Element, Resistor, require_timestep

if TYPE_CHECKING:
    from ..accel import Accelerator

# duration/dt within this relative distance of an integer snaps to it
STEP_REL_TOL = 1e-9


def validate_timing(duration: float, dt: float) -> None:
    """Raise DomainError for a non-positive dt or a negative/non-finite duration."""
    require_timestep(dt)
    duration = float(duration)
    if not math.isfinite(duration) or duration < 0.0:
        raise DomainError(f"duration must be finite and >= 0, got {duration!r}")
    if not math.isfinite(duration / dt):
        raise DomainError(f"duration / dt overflows: {duration!r} / {dt!r}")


def num_steps(duration: float, dt: float) -> int:
    """
    Number of steps needed to cover duration at increment dt.

    ceil(duration / dt), except that a ratio within STEP_REL_TOL of an integer
    is taken as that integer, so 1e-3 / 1e-4 gives 10 steps rather than 11.
    The covered time n * dt is always >= duration (up to that tolerance).

    Examples:
        num_steps(1e-3, 1e-4) -> 10
        num_steps(1e-3, 3e-4) -> 4
        num_steps(0.0, 1e-6)  -> 0
    """
    ratio = duration / dt
    nearest = round(ratio)
    if abs(ratio - nearest) <= STEP_REL_TOL * max(1.0, abs(ratio)):
        return int(nearest)
    return int(math.ceil(ratio))


def _batch_resistors(
    resistors: Sequence[Resistor],
    dt: float,
    accelerator: Accelerator,
) -> bool:
    """Update resistor currents through the accelerator. Returns False on any failure."""
    voltages = [r.voltage_across() for r in resistors]
    resistances = [r.resistance for r in resistors]
    ok, currents = accelerator.simulate_components_batch(voltages, resistances, dt)
    if not ok or len(currents) != len(resistors):
        return False
    for r, i in zip(resistors, currents):
        r.record_current(i)
    return True


def step_elements(
    elements: Sequence[Element],
    dt: float,
    accelerator: Accelerator | None = None,
) -> None:
    """Simulate every element once, in order."""
    batched: list[Resistor] = []
    if accelerator is not None and accelerator.available:
        batched = [e for e in elements if type(e) is Resistor and e.connected]
        if batched and not _batch_resistors(batched, dt, accelerator):
            logger.debug("Accelerator batch failed, using local resistor update")
            batched = []

    skip = {id(r) for r in batched}
    for element in elements:
        if id(element) not in skip:
            element.simulate(dt)


def run_steps(
    elements: Sequence[Element],
    dt: float,
    n_steps: int,
    *,
    accelerator: Accelerator | None = None,
    on_step: Callable[[int, float], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> int:
    """
    Run up to n_steps steps over a fixed element sequence.

    Returns the number of steps run (less than n_steps only if should_stop
    returned True).
    """
    for k in range(n_steps):
        if should_stop is not None and should_stop():
            logger.info(f"Simulation stopped before step {k} of {n_steps}")
            return k
        step_elements(elements, dt, accelerator)
        if on_step is not None:
            on_step(k, (k + 1) * dt)
    return n_steps
