"""
Core image editing operations for Tinted Image.

This module provides the low-level bitmap operations the transform pipeline
is built on. All functions return new images; inputs are never modified.

Functions:
    decode_image: Decode an in-memory image buffer into an RGBA bitmap
    new_bitmap: Create a transparent RGBA bitmap
    is_empty: Check whether a bitmap has no area
    crop_origin: Resolve a crop offset against an anchor
    draw_image_region: Copy a region of a bitmap, transparent outside bounds
    apply_color_matrix: Render a bitmap through a 5x5 color matrix
    flip_image: Return a flipped copy of a bitmap
    rotated_bounds: Size of the canvas holding a rotated bitmap
    rotate_image: Rotate a bitmap clockwise onto a grown canvas
"""

import io
import math
from typing import Any, Tuple

import numpy as np

from TI_Libs.constants import BITMAP_MODE, MAX_CHANNEL_VALUE
from TI_Libs.ImageEditingLib.image_models import CropAnchor, CropRect, FlipMode
from TI_Libs.pillow_compat import Image

TRANSPARENT = (0, 0, 0, 0)

_FLIP_TRANSPOSE = {
    FlipMode.HORIZONTAL: Image.Transpose.FLIP_LEFT_RIGHT,
    FlipMode.VERTICAL: Image.Transpose.FLIP_TOP_BOTTOM,
    FlipMode.BOTH: Image.Transpose.ROTATE_180,
}


def decode_image(buffer: bytes) -> Any:
    """
    Decode an in-memory image buffer.

    The image is fully decoded before returning so the stream can be closed.

    Args:
        buffer: Raw encoded image bytes (PNG, JPEG, BMP, ...)

    Returns:
        A PIL Image in RGBA mode

    Raises:
        ValueError: If the buffer is empty
        OSError: If Pillow cannot identify or decode the data
        DecompressionBombError: If the image exceeds Pillow's pixel limit
    """
    if not buffer:
        raise ValueError("Image buffer is empty")

    with io.BytesIO(buffer) as stream:
        with Image.open(stream) as img:
            img.load()
            return img.convert(BITMAP_MODE)


def new_bitmap(width: int, height: int) -> Any:
    """Create a fully transparent RGBA bitmap."""
    return Image.new(BITMAP_MODE, (width, height), TRANSPARENT)


def is_empty(image: Any) -> bool:
    return image.width == 0 or image.height == 0


def crop_origin(crop: CropRect, anchor: CropAnchor, width: int, height: int) -> Tuple[int, int]:
    """
    Resolve the crop offset against the source size and anchor.

    Args:
        crop: Configured crop rectangle
        anchor: Corner or center the offset is relative to
        width: Source image width
        height: Source image height

    Returns:
        (x, y) origin of the sampled region in source coordinates
    """
    if anchor == CropAnchor.TOP_LEFT:
        return crop.x, crop.y
    if anchor == CropAnchor.TOP_RIGHT:
        return crop.x + width, crop.y
    if anchor == CropAnchor.BOTTOM_RIGHT:
        return crop.x + width, crop.y + height
    if anchor == CropAnchor.BOTTOM_LEFT:
        return crop.x, crop.y + height
    if anchor == CropAnchor.CENTER:
        return crop.x + width // 2, crop.y + height // 2
    raise ValueError(f"Unsupported crop anchor: {anchor}")


def draw_image_region(image: Any, x: int, y: int, width: int, height: int) -> Any:
    """
    Copy a width x height region starting at (x, y) into a new bitmap.

    The region may extend beyond the source; those pixels are transparent.
    """
    region = image.crop((x, y, x + width, y + height))
    if region.mode != BITMAP_MODE:
        region = region.convert(BITMAP_MODE)
    return region


def apply_color_matrix(image: Any, matrix: np.ndarray) -> Any:
    """
    Render an image through a 5x5 color matrix.

    Each pixel is taken as the row vector [r, g, b, a, 1] with channels
    normalized to 0..1 and multiplied by the matrix. The first four output
    columns become the new RGBA values, clipped to the valid range.

    Args:
        image: PIL Image to render
        matrix: 5x5 color matrix

    Returns:
        A new RGBA PIL Image of the same size
    """
    if image.mode != BITMAP_MODE:
        image = image.convert(BITMAP_MODE)

    if is_empty(image):
        return new_bitmap(image.width, image.height)

    pixels = np.asarray(image, dtype=np.float32) / MAX_CHANNEL_VALUE
    height, width = pixels.shape[:2]
    homogeneous = np.concatenate(
        [pixels, np.ones((height, width, 1), dtype=np.float32)],
        axis=2,
    )

    result = homogeneous @ np.asarray(matrix, dtype=np.float32)[:, :4]
    result = np.clip(result, 0.0, 1.0) * MAX_CHANNEL_VALUE
    return Image.fromarray(np.rint(result).astype(np.uint8))


def flip_image(image: Any, mode: FlipMode) -> Any:
    """Return a flipped copy of the image. The input is left untouched."""
    if mode == FlipMode.NONE:
        return image.copy()
    return image.transpose(_FLIP_TRANSPOSE[mode])


def _rotated_extent(width: float, height: float, degrees: float) -> Tuple[float, float]:
    radians = math.radians(degrees)
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)
    return (
        abs(width * cos_r) + abs(height * sin_r),
        abs(width * sin_r) + abs(height * cos_r),
    )


def rotated_bounds(width: float, height: float, degrees: float) -> Tuple[int, int]:
    """
    Compute the canvas size that holds an image rotated by `degrees`.

    Returns:
        (width, height) rounded to the nearest pixel
    """
    transform_w, transform_h = _rotated_extent(width, height, degrees)
    return int(transform_w + 0.5), int(transform_h + 0.5)


def rotate_image(image: Any, degrees: float) -> Any:
    """
    Rotate an image clockwise about its center onto a grown canvas.

    The canvas size comes from rotated_bounds(). The source is sampled with a
    half pixel inset on every edge so the rotated border is anti-aliased;
    pixels outside the source are transparent.

    Args:
        image: PIL Image to rotate
        degrees: Clockwise rotation angle in degrees

    Returns:
        A new RGBA PIL Image
    """
    if image.mode != BITMAP_MODE:
        image = image.convert(BITMAP_MODE)

    if is_empty(image):
        return new_bitmap(image.width, image.height)

    width, height = image.size
    radians = math.radians(degrees)
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)

    transform_w, transform_h = _rotated_extent(width, height, degrees)
    out_size = rotated_bounds(width, height, degrees)
    cx = transform_w / 2.0
    cy = transform_h / 2.0

    # Output -> source mapping: undo the rotation about the canvas center,
    # then stretch [0, w] onto [-0.5, w + 0.5] for the anti-aliased edge.
    scale_x = (width + 1.0) / width
    scale_y = (height + 1.0) / height
    data = (
        scale_x * cos_r,
        scale_x * sin_r,
        -0.5 + scale_x * (width / 2.0 - cos_r * cx - sin_r * cy),
        -scale_y * sin_r,
        scale_y * cos_r,
        -0.5 + scale_y * (height / 2.0 + sin_r * cx - cos_r * cy),
    )

    return image.transform(
        out_size,
        Image.Transform.AFFINE,
        data,
        resample=Image.Resampling.BICUBIC,
    )
