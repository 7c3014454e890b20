"""Configuration module -- exports Settings and load_config."""

from techpulse.config.loader import load_config
from techpulse.config.settings import Settings

__all__ = ["Settings", "load_config"]
