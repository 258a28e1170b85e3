"""Pytest configuration for pylumped tests.

Pins JAX to the CPU backend before anything imports it, so accelerator
tests behave the same with or without a GPU present.
"""

import os


def pytest_configure(config):
    os.environ.setdefault('JAX_PLATFORMS', 'cpu')
