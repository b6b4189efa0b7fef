"""Driver configuration model, comparison and application settings."""
from .schema import FlexConfig, IOSettings, normalize_config
from .compare import ConfigDiff, configs_equal, deep_equal, diff_configs
from .settings import AppSettings, AudioBackend, SettingsError, load_settings

__all__ = [
    "FlexConfig",
    "IOSettings",
    "normalize_config",
    "ConfigDiff",
    "configs_equal",
    "deep_equal",
    "diff_configs",
    "AppSettings",
    "AudioBackend",
    "SettingsError",
    "load_settings",
]
