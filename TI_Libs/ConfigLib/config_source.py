"""
Configuration sources for Tinted Image.

A config source answers typed reads of (section, key) pairs and falls back to
the given default when a key is missing or its value cannot be parsed.

Classes:
    ConfigSource: Base class implementing typed reads over raw strings
    DictConfigSource: Config source backed by nested dictionaries
    IniConfigSource: Config source backed by an INI file (configparser)
"""

import configparser
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from TI_Libs.constants import (
    COLOR_SEPARATOR,
    FLOATS_SEPARATOR,
    MAX_CHANNEL_VALUE,
    MIN_CHANNEL_VALUE,
)

RgbaColor = Tuple[int, int, int, int]

logger = logging.getLogger(__name__)


def _clamp_channel(value: int) -> int:
    return max(MIN_CHANNEL_VALUE, min(MAX_CHANNEL_VALUE, value))


def parse_color(value: str) -> Optional[RgbaColor]:
    """
    Parse a color written as "R,G,B[,A]" or as hex "RRGGBB[AA]".

    Returns:
        RGBA tuple, or None if the value is not a color
    """
    value = value.strip()

    if COLOR_SEPARATOR in value:
        parts = [part.strip() for part in value.split(COLOR_SEPARATOR)]
        if len(parts) not in (3, 4):
            return None
        try:
            channels = [_clamp_channel(int(float(part))) for part in parts]
        except (ValueError, OverflowError):
            return None
        if len(channels) == 3:
            channels.append(MAX_CHANNEL_VALUE)
        return tuple(channels)

    if len(value) not in (6, 8):
        return None
    try:
        channels = [int(value[i:i + 2], 16) for i in range(0, len(value), 2)]
    except ValueError:
        return None
    if len(channels) == 3:
        channels.append(MAX_CHANNEL_VALUE)
    return tuple(channels)


def parse_floats(value: str) -> List[float]:
    """
    Parse a ";"-separated list of floats.

    Returns:
        The floats in order, or an empty list if any entry is not a finite
        number
    """
    tokens = [token.strip() for token in value.split(FLOATS_SEPARATOR)]
    try:
        values = [float(token) for token in tokens if token]
    except ValueError:
        return []
    if not all(math.isfinite(number) for number in values):
        return []
    return values


class ConfigSource:
    """
    Base class for configuration sources.

    Subclasses implement get_raw(); the typed read methods are shared.
    """

    def get_raw(self, section: str, key: str) -> Optional[str]:
        """Return the raw string value of a key, or None if it is missing."""
        raise NotImplementedError

    def read_string(self, section: str, key: str, default: str = "") -> str:
        value = self.get_raw(section, key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def read_int(self, section: str, key: str, default: int = 0) -> int:
        return int(self.read_float(section, key, default))

    def read_float(self, section: str, key: str, default: float = 0.0) -> float:
        """Read a finite float; inf and nan count as unparseable."""
        value = self.read_string(section, key)
        if not value:
            return default
        try:
            number = float(value)
        except ValueError:
            number = math.nan
        if not math.isfinite(number):
            logger.warning(f"{key}={value} is not a number in [{section}], using {default}")
            return default
        return number

    def read_floats(self, section: str, key: str) -> List[float]:
        value = self.read_string(section, key)
        if not value:
            return []
        return parse_floats(value)

    def read_color(self, section: str, key: str, default: RgbaColor) -> RgbaColor:
        value = self.read_string(section, key)
        if not value:
            return default
        color = parse_color(value)
        if color is None:
            logger.warning(f"{key}={value} is not a color in [{section}], using {default}")
            return default
        return color


class DictConfigSource(ConfigSource):
    """
    Config source over a mapping of section -> key -> value.

    Values that are not strings are converted with str(), so node
    dictionaries holding numbers and booleans can be read directly.
    """

    def __init__(self, sections: Mapping[str, Mapping[str, Any]]):
        self._sections: Dict[str, Mapping[str, Any]] = dict(sections)

    def get_raw(self, section: str, key: str) -> Optional[str]:
        values = self._sections.get(section)
        if values is None or key not in values:
            return None
        value = values[key]
        if value is None:
            return None
        if isinstance(value, bool):
            return "1" if value else "0"
        return str(value)


class IniConfigSource(ConfigSource):
    """
    Config source over an INI file.

    Keys are case-sensitive and values are read verbatim (no interpolation).
    """

    def __init__(self, parser: configparser.ConfigParser):
        self._parser = parser

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str
        return parser

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "IniConfigSource":
        """
        Read an INI file.

        Raises:
            OSError: If the file cannot be read
            configparser.Error: If the file is not valid INI
        """
        parser = cls._new_parser()
        with open(path, "r", encoding="utf-8") as handle:
            parser.read_file(handle)
        return cls(parser)

    @classmethod
    def from_string(cls, text: str) -> "IniConfigSource":
        parser = cls._new_parser()
        parser.read_string(text)
        return cls(parser)

    def sections(self) -> List[str]:
        return self._parser.sections()

    def get_raw(self, section: str, key: str) -> Optional[str]:
        if not self._parser.has_section(section):
            return None
        return self._parser.get(section, key, fallback=None)
