"""Configuration module for alchemykit."""

from alchemykit.config.loader import get_config_path, load_config, save_config
from alchemykit.config.schema import AlchemyConfig

__all__ = ["AlchemyConfig", "load_config", "save_config", "get_config_path"]
