"""Exception types raised by pylumped."""


class DomainError(ValueError):
    """Invalid physical configuration (e.g. non-positive resistance, zero timestep)."""
