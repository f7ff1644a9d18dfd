"""
Constants and configuration values for Tinted Image.

This module centralizes all constant values, default key names and
default parameter values used throughout the library.
"""

# Image slot defaults
DEFAULT_CONFIG_NAME = "Image"
DEFAULT_IMAGE_EXTENSION = ".png"
BITMAP_MODE = "RGBA"

# Config key names (without prefix)
KEY_IMAGE_NAME = "ImageName"
KEY_IMAGE_CROP = "ImageCrop"
KEY_GREYSCALE = "Greyscale"
KEY_IMAGE_TINT = "ImageTint"
KEY_IMAGE_ALPHA = "ImageAlpha"
KEY_COLOR_MATRIX_PREFIX = "ColorMatrix"
KEY_IMAGE_FLIP = "ImageFlip"
KEY_IMAGE_ROTATE = "ImageRotate"

# Default parameter values
DEFAULT_TINT_COLOR = (255, 255, 255, 255)
DEFAULT_FLIP = "NONE"
DEFAULT_ROTATION = 0.0
DISABLED_CROP_VALUE = -1

# Value parsing
CROP_SEPARATOR = ","
FLOATS_SEPARATOR = ";"
COLOR_SEPARATOR = ","
MATRIX_ROW_LENGTH = 5

# Channel limits
MIN_CHANNEL_VALUE = 0
MAX_CHANNEL_VALUE = 255

# Greyscale luma weights
LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114

# Node types
NODE_TYPE_TINTED_IMAGE = "Tinted Image"
NODE_TYPE_IMAGE_ADJUST = "Image Adjust"

# Node field names
FIELD_NODE_ID = "id"
FIELD_NODE_TYPE = "type"
FIELD_KEY_PREFIX = "key_prefix"
FIELD_DISABLE_TRANSFORM = "disable_transform"
FIELD_LOAD_ALWAYS = "load_always"
FIELD_BASE_DIR = "base_dir"
