"""
Configuration binding for Tinted Image.

Maps named configuration keys to ImageParameters, validating the crop anchor
and flip keyword. Invalid values raise ConfigError, which callers propagate
to abort processing of the offending section.

Classes:
    ConfigError: Fatal configuration error naming key, value and section
    ConfigKeys: Names of the keys an image slot reads
    ConfigBinder: Reads ImageParameters from a ConfigSource
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from TI_Libs.constants import (
    CROP_SEPARATOR,
    DEFAULT_FLIP,
    DEFAULT_ROTATION,
    DEFAULT_TINT_COLOR,
    DISABLED_CROP_VALUE,
    KEY_COLOR_MATRIX_PREFIX,
    KEY_GREYSCALE,
    KEY_IMAGE_ALPHA,
    KEY_IMAGE_CROP,
    KEY_IMAGE_FLIP,
    KEY_IMAGE_NAME,
    KEY_IMAGE_ROTATE,
    KEY_IMAGE_TINT,
    MATRIX_ROW_LENGTH,
    MAX_CHANNEL_VALUE,
    MIN_CHANNEL_VALUE,
)
from TI_Libs.ConfigLib.config_source import ConfigSource
from TI_Libs.ImageEditingLib import color_matrix
from TI_Libs.ImageEditingLib.image_models import (
    DISABLED_CROP,
    CropAnchor,
    CropRect,
    FlipMode,
    ImageParameters,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ConfigError(ValueError):
    """A configuration value that cannot be used.

    Attributes:
        key: Offending config key
        value: Offending value as written
        section: Section the key was read from
    """

    def __init__(self, key: str, value: str, section: str, detail: str = ""):
        self.key = key
        self.value = value
        self.section = section
        qualifier = f" {detail}" if detail else ""
        super().__init__(f"{key}={value}{qualifier} is not valid in section [{section}].")


@dataclass(frozen=True)
class ConfigKeys:
    image_name: str = KEY_IMAGE_NAME
    image_crop: str = KEY_IMAGE_CROP
    greyscale: str = KEY_GREYSCALE
    image_tint: str = KEY_IMAGE_TINT
    image_alpha: str = KEY_IMAGE_ALPHA
    color_matrix_1: str = KEY_COLOR_MATRIX_PREFIX + "1"
    color_matrix_2: str = KEY_COLOR_MATRIX_PREFIX + "2"
    color_matrix_3: str = KEY_COLOR_MATRIX_PREFIX + "3"
    color_matrix_4: str = KEY_COLOR_MATRIX_PREFIX + "4"
    color_matrix_5: str = KEY_COLOR_MATRIX_PREFIX + "5"
    image_flip: str = KEY_IMAGE_FLIP
    image_rotate: str = KEY_IMAGE_ROTATE

    @classmethod
    def with_prefix(cls, prefix: str) -> "ConfigKeys":
        """Build key names with a prefix, e.g. "Mask" -> "MaskImageCrop"."""
        defaults = cls()
        return cls(**{
            name: prefix + getattr(defaults, name)
            for name in cls.__dataclass_fields__
        })

    @property
    def color_matrix_rows(self) -> List[str]:
        return [
            self.color_matrix_1,
            self.color_matrix_2,
            self.color_matrix_3,
            self.color_matrix_4,
            self.color_matrix_5,
        ]


DEFAULT_CONFIG_KEYS = ConfigKeys()


def _parse_int_token(token: str) -> int:
    """Parse the leading integer of a token; tokens without one read as 0."""
    match = _LEADING_INT.match(token)
    return int(match.group(1)) if match else 0


class ConfigBinder:
    """
    Reads ImageParameters from a config source.

    Attributes:
        keys: Key names to read
        disable_transform: Ignore the crop and rotate keys when True
    """

    def __init__(self, keys: ConfigKeys = DEFAULT_CONFIG_KEYS, disable_transform: bool = False):
        self.keys = keys
        self.disable_transform = disable_transform

    def read_parameters(self, source: ConfigSource, section: str) -> ImageParameters:
        """
        Read and validate all image parameters of a section.

        Raises:
            ConfigError: If the crop anchor or flip keyword is invalid
        """
        crop, anchor = DISABLED_CROP, CropAnchor.TOP_LEFT
        rotation = DEFAULT_ROTATION
        if not self.disable_transform:
            crop, anchor = self.read_crop(source, section)
            rotation = source.read_float(section, self.keys.image_rotate, DEFAULT_ROTATION)

        return ImageParameters(
            crop=crop,
            crop_anchor=anchor,
            greyscale=source.read_int(section, self.keys.greyscale, 0) != 0,
            color_matrix=self.read_color_matrix(source, section),
            flip=self.read_flip(source, section),
            rotation=rotation,
        )

    def read_crop(self, source: ConfigSource, section: str) -> Tuple[CropRect, CropAnchor]:
        """
        Read "x,y,width,height[,anchor]".

        Missing fields keep the disabled default; a value without a comma
        leaves the crop disabled.
        """
        value = source.read_string(section, self.keys.image_crop, "")
        if not value or CROP_SEPARATOR not in value:
            return DISABLED_CROP, CropAnchor.TOP_LEFT

        fields = [DISABLED_CROP_VALUE] * 4 + [int(CropAnchor.TOP_LEFT)]
        tokens = [token for token in value.split(CROP_SEPARATOR) if token.strip()]
        for index, token in enumerate(tokens[:len(fields)]):
            fields[index] = _parse_int_token(token)

        x, y, width, height, anchor_index = fields
        try:
            anchor = CropAnchor(anchor_index)
        except ValueError:
            raise ConfigError(self.keys.image_crop, value, section, "(origin)") from None

        return CropRect(x, y, width, height), anchor

    def read_color_matrix(self, source: ConfigSource, section: str) -> np.ndarray:
        """
        Read ColorMatrix1..5, falling back to the tint color and alpha.

        A row given as exactly five floats replaces the first four columns of
        that row. Missing rows 1-3 take the tint channel / 255 on the
        diagonal, a missing row 4 takes alpha / 255 and a missing row 5 stays
        the identity row.
        """
        tint = source.read_color(section, self.keys.image_tint, DEFAULT_TINT_COLOR)
        alpha = source.read_int(section, self.keys.image_alpha, tint[3])
        alpha = max(MIN_CHANNEL_VALUE, min(MAX_CHANNEL_VALUE, alpha))

        fallbacks = [tint[0], tint[1], tint[2], alpha, None]
        matrix = color_matrix.identity_matrix()

        for row, (key, fallback) in enumerate(zip(self.keys.color_matrix_rows, fallbacks)):
            values = source.read_floats(section, key)
            if len(values) == MATRIX_ROW_LENGTH:
                matrix[row, :4] = values[:4]
            elif fallback is not None:
                matrix[row, row] = fallback / MAX_CHANNEL_VALUE

        return color_matrix.as_matrix(matrix)

    def read_flip(self, source: ConfigSource, section: str) -> FlipMode:
        value = source.read_string(section, self.keys.image_flip, DEFAULT_FLIP)
        try:
            return FlipMode.from_keyword(value)
        except ValueError:
            raise ConfigError(self.keys.image_flip, value, section) from None
