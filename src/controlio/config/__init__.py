"""Configuration: config manager and the shipped JSON file."""

from controlio.config.config_manager import load_config

__all__ = ["load_config"]
