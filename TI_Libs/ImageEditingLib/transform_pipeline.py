"""
Crop, tint and transform pipeline for Tinted Image.

Stages run in a fixed order. Each stage reads the output of the last stage
that produced one (or the source bitmap) and returns a new bitmap, or None
when its parameters make it a pass-through.

Functions:
    apply_crop: Crop stage
    apply_tint: Greyscale and color matrix stage
    apply_transform: Flip and rotation stage

Classes:
    TransformPipeline: Runs the stages and keeps their outputs for reuse
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from TI_Libs.ImageEditingLib import color_matrix
from TI_Libs.ImageEditingLib.image_editing_ops import (
    apply_color_matrix,
    crop_origin,
    draw_image_region,
    flip_image,
    is_empty,
    new_bitmap,
    rotate_image,
)
from TI_Libs.ImageEditingLib.image_models import DirtyFlags, FlipMode, ImageParameters

logger = logging.getLogger(__name__)

StageFunction = Callable[[Any, ImageParameters], Optional[Any]]


def apply_crop(image: Any, params: ImageParameters) -> Optional[Any]:
    """
    Crop stage.

    An empty crop rectangle (zero width or height) yields a 0x0 bitmap,
    which makes the later stages pass-throughs.

    Returns:
        The cropped bitmap, or None when no crop is configured
    """
    crop = params.crop
    if not crop.is_set:
        return None

    if crop.is_empty:
        return new_bitmap(0, 0)

    x, y = crop_origin(crop, params.crop_anchor, image.width, image.height)
    return draw_image_region(image, x, y, crop.width, crop.height)


def apply_tint(image: Any, params: ImageParameters) -> Optional[Any]:
    """
    Greyscale and tint stage.

    Greyscale is rendered in its own pass first so that the tint matrix
    multiplies a neutral luminance image and alpha is left untouched.

    Returns:
        The tinted bitmap, or None when neither greyscale nor a tint is set
    """
    if not params.needs_tint:
        return None

    if params.greyscale:
        image = apply_color_matrix(image, color_matrix.GREYSCALE_MATRIX)
        if color_matrix.is_identity(params.color_matrix):
            return image

    return apply_color_matrix(image, params.color_matrix)


def apply_transform(image: Any, params: ImageParameters) -> Optional[Any]:
    """
    Flip and rotation stage.

    The flip is applied to a copy before rotating; the input bitmap is never
    modified. Without rotation the output keeps the input size.

    Returns:
        The transformed bitmap, or None when neither flip nor rotation is set
    """
    if params.rotation != 0.0:
        flipped = flip_image(image, params.flip) if params.flip != FlipMode.NONE else image
        return rotate_image(flipped, params.rotation)

    if params.flip != FlipMode.NONE:
        return flip_image(image, params.flip)

    return None


# (stage name, DirtyFlags attribute, stage function)
STAGES: List[Tuple[str, str, StageFunction]] = [
    ("crop", "needs_crop", apply_crop),
    ("tint", "needs_tint", apply_tint),
    ("transform", "needs_transform", apply_transform),
]


class TransformPipeline:
    """
    Runs the crop, tint and transform stages in order.

    The output of every stage from the last successful run is kept. A stage
    re-runs when its flag is set, when an earlier stage re-ran, or when it
    has no kept output; otherwise the kept output is reused. Kept outputs are
    only replaced once every stage has succeeded.

    Example:
        >>> pipeline = TransformPipeline()
        >>> params = ImageParameters(greyscale=True)
        >>> derived = pipeline.run(image, params, DirtyFlags(needs_tint=True))
    """

    def __init__(self):
        self._stage_outputs: Dict[str, Optional[Any]] = {}

    def reset(self) -> None:
        """Forget kept stage outputs (the source image changed or went away)."""
        self._stage_outputs = {}

    def run(self, source: Any, params: ImageParameters, flags: DirtyFlags) -> Optional[Any]:
        """
        Run the pipeline over a source bitmap.

        Args:
            source: Source PIL Image with non-zero size
            params: Stage parameters
            flags: Stages whose inputs changed since the last run

        Returns:
            The derived bitmap, or None when no stage produced output
        """
        outputs: Dict[str, Optional[Any]] = {}
        current = source
        derived = None
        rerun = False

        for name, flag, stage in STAGES:
            rerun = rerun or getattr(flags, flag) or name not in self._stage_outputs

            if not rerun:
                result = self._stage_outputs[name]
            elif is_empty(current):
                result = None
            else:
                logger.debug(f"Running {name} stage on {current.width}x{current.height} image")
                result = stage(current, params)

            outputs[name] = result
            if result is not None:
                current = derived = result

        self._stage_outputs = outputs
        return derived
