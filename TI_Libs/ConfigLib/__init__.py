"""
ConfigLib - Configuration reading and binding

This module reads typed values from configuration sources and binds
them to the image parameters used by the pipeline.
"""

from TI_Libs.ConfigLib.config_source import (
    ConfigSource,
    DictConfigSource,
    IniConfigSource,
)
from TI_Libs.ConfigLib.config_binder import (
    DEFAULT_CONFIG_KEYS,
    ConfigBinder,
    ConfigError,
    ConfigKeys,
)

__all__ = [
    "ConfigSource",
    "DictConfigSource",
    "IniConfigSource",
    "DEFAULT_CONFIG_KEYS",
    "ConfigBinder",
    "ConfigError",
    "ConfigKeys",
]
