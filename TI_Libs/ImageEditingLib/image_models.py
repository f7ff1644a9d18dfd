"""
Image editing data models for Tinted Image.

This module defines core data structures used throughout the image pipeline.

Classes:
    CropAnchor: Reference corner or center used to interpret a crop offset
    FlipMode: Flip applied by the transform stage
    CropRect: Crop rectangle where -1 width/height means "not set"
    ImageParameters: Full parameter set read from configuration
    SourceImage: Decoded bitmap with the buffer and timestamp it came from
    DirtyFlags: Which pipeline stages must re-run

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Tuple

import numpy as np

from TI_Libs.constants import DEFAULT_ROTATION, DISABLED_CROP_VALUE
from TI_Libs.ImageEditingLib import color_matrix
from TI_Libs.pillow_compat import ImageClass

RgbaColor = Tuple[int, int, int, int]


class CropAnchor(IntEnum):
    TOP_LEFT = 0
    TOP_RIGHT = 1
    BOTTOM_RIGHT = 2
    BOTTOM_LEFT = 3
    CENTER = 4


class FlipMode(Enum):
    NONE = "NONE"
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"
    BOTH = "BOTH"

    @classmethod
    def from_keyword(cls, keyword: str) -> "FlipMode":
        """
        Parse a flip keyword case-insensitively.

        Raises:
            ValueError: If the keyword is not a known flip mode
        """
        try:
            return cls(keyword.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown flip mode: {keyword}") from None


@dataclass(frozen=True)
class CropRect:
    x: int = DISABLED_CROP_VALUE
    y: int = DISABLED_CROP_VALUE
    width: int = DISABLED_CROP_VALUE
    height: int = DISABLED_CROP_VALUE

    @property
    def is_set(self) -> bool:
        return self.width >= 0 and self.height >= 0

    @property
    def is_empty(self) -> bool:
        """True when the crop is set but has no area."""
        return self.is_set and (self.width == 0 or self.height == 0)


DISABLED_CROP = CropRect()


@dataclass(frozen=True, eq=False)
class ImageParameters:
    """Parameters controlling the crop, tint and transform stages.

    Attributes:
        crop: Crop rectangle (disabled by default)
        crop_anchor: Anchor the crop offset is relative to
        greyscale: Convert to greyscale before tinting
        color_matrix: Read-only 5x5 tint matrix
        flip: Flip mode
        rotation: Rotation angle in degrees, clockwise
    """

    crop: CropRect = DISABLED_CROP
    crop_anchor: CropAnchor = CropAnchor.TOP_LEFT
    greyscale: bool = False
    color_matrix: np.ndarray = field(default_factory=lambda: color_matrix.IDENTITY_MATRIX)
    flip: FlipMode = FlipMode.NONE
    rotation: float = DEFAULT_ROTATION

    def __post_init__(self):
        object.__setattr__(self, "color_matrix", color_matrix.as_matrix(self.color_matrix))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageParameters):
            return NotImplemented
        return (
            self.crop == other.crop
            and self.crop_anchor == other.crop_anchor
            and self.greyscale == other.greyscale
            and color_matrix.equals(self.color_matrix, other.color_matrix)
            and self.flip == other.flip
            and self.rotation == other.rotation
        )

    @property
    def needs_crop(self) -> bool:
        return self.crop.is_set

    @property
    def needs_tint(self) -> bool:
        return self.greyscale or not color_matrix.is_identity(self.color_matrix)

    @property
    def needs_transform(self) -> bool:
        return self.flip != FlipMode.NONE or self.rotation != 0.0


@dataclass
class SourceImage:
    """A decoded bitmap together with the bytes and timestamp it came from.

    The buffer is kept alive for as long as the bitmap is in use.
    """

    path: Path
    bitmap: ImageClass
    buffer: bytes
    modified: int

    @property
    def width(self) -> int:
        return self.bitmap.width

    @property
    def height(self) -> int:
        return self.bitmap.height

    @property
    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class DirtyFlags:
    needs_crop: bool = False
    needs_tint: bool = False
    needs_transform: bool = False

    def any(self) -> bool:
        return self.needs_crop or self.needs_tint or self.needs_transform

    def merged(self, other: "DirtyFlags") -> "DirtyFlags":
        """Return the union of two flag sets."""
        return DirtyFlags(
            needs_crop=self.needs_crop or other.needs_crop,
            needs_tint=self.needs_tint or other.needs_tint,
            needs_transform=self.needs_transform or other.needs_transform,
        )


CLEAN_FLAGS = DirtyFlags()
