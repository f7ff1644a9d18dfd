"""
ImageEditingLib - Core image editing functionality

This module provides the color matrix operations, image models, image
loading and the crop/tint/transform pipeline for Tinted Image.
"""

from TI_Libs.ImageEditingLib.image_models import (
    CLEAN_FLAGS,
    DISABLED_CROP,
    CropAnchor,
    CropRect,
    DirtyFlags,
    FlipMode,
    ImageParameters,
    RgbaColor,
    SourceImage,
)
from TI_Libs.ImageEditingLib.color_matrix import (
    GREYSCALE_MATRIX,
    IDENTITY_MATRIX,
    equals,
    is_identity,
)
from TI_Libs.ImageEditingLib.change_tracker import ChangeTracker
from TI_Libs.ImageEditingLib.image_loader import (
    ImageLoader,
    LoadOutcome,
    LoadResult,
    resolve_image_path,
)
from TI_Libs.ImageEditingLib.transform_pipeline import (
    TransformPipeline,
    apply_crop,
    apply_tint,
    apply_transform,
)

__all__ = [
    "CLEAN_FLAGS",
    "DISABLED_CROP",
    "CropAnchor",
    "CropRect",
    "DirtyFlags",
    "FlipMode",
    "ImageParameters",
    "RgbaColor",
    "SourceImage",
    "GREYSCALE_MATRIX",
    "IDENTITY_MATRIX",
    "equals",
    "is_identity",
    "ChangeTracker",
    "ImageLoader",
    "LoadOutcome",
    "LoadResult",
    "resolve_image_path",
    "TransformPipeline",
    "apply_crop",
    "apply_tint",
    "apply_transform",
]
