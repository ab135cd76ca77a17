"""
Operational helpers: configuration loading and logging setup.
"""

from .config import load_config, apply_profile, validate_config, build_config
from .logging import setup_logging

__all__ = [
    "load_config",
    "apply_profile",
    "validate_config",
    "build_config",
    "setup_logging",
]
