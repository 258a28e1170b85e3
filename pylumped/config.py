"""Runtime configuration.

Defaults come from environment variables so that scripts and CI can change
behaviour without code changes:

    PYLUMPED_ACCELERATOR         use the JAX accelerator for batched updates (default: off)
    PYLUMPED_EXTENSION_DIR       directory scanned for extension modules (default: extensions)
    PYLUMPED_REPLACE_DUPLICATES  last-loaded extension wins on a name clash (default: on)
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(name, '').lower()
    if val in ('1', 'true', 'yes', 'on'):
        return True
    if val in ('0', 'false', 'no', 'off'):
        return False
    return default


@dataclass
class SimConfig:
    """Configuration for circuits and extension registries.

    Attributes:
        accelerator: Try the JAX accelerator for batched resistor updates
        extension_dir: Default directory for extension discovery
        replace_duplicates: On an extension name clash, replace the loaded
            extension (True) or reject the newcomer (False)
    """
    accelerator: bool = field(default_factory=lambda: _env_bool('PYLUMPED_ACCELERATOR'))
    extension_dir: str = field(default_factory=lambda: os.environ.get(
        'PYLUMPED_EXTENSION_DIR', 'extensions'))
    replace_duplicates: bool = field(
        default_factory=lambda: _env_bool('PYLUMPED_REPLACE_DUPLICATES', True))


_global_config = SimConfig()


def get_config() -> SimConfig:
    """Get the process-wide default configuration."""
    return _global_config


def set_config(config: SimConfig) -> None:
    """Replace the process-wide default configuration."""
    global _global_config
    _global_config = config
