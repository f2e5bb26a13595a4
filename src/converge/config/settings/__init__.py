"""Config settings – environment-based configuration."""
from converge.config.settings.base import Settings
from converge.config.settings.converge import ConvergeSettings
from converge.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["ConvergeSettings", "DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
