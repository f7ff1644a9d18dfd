"""
Tests for ConfigBinder.

Tests cover:
- Crop parsing and anchor validation
- Greyscale, tint, alpha and color matrix rows
- Flip keyword validation
- Rotation and disabled transforms
- Prefixed key names
"""

import unittest

from TI_Libs.ConfigLib.config_binder import (
    ConfigBinder,
    ConfigError,
    ConfigKeys,
)
from TI_Libs.ConfigLib.config_source import DictConfigSource
from TI_Libs.ImageEditingLib.color_matrix import is_identity
from TI_Libs.ImageEditingLib.image_models import (
    DISABLED_CROP,
    CropAnchor,
    CropRect,
    FlipMode,
)

SECTION = "Meter"


def _read(values, binder=None):
    binder = binder or ConfigBinder()
    return binder.read_parameters(DictConfigSource({SECTION: values}), SECTION)


class TestDefaults(unittest.TestCase):
    """Test an empty section."""

    def test_empty_section(self):
        params = _read({})

        self.assertEqual(params.crop, DISABLED_CROP)
        self.assertEqual(params.crop_anchor, CropAnchor.TOP_LEFT)
        self.assertFalse(params.greyscale)
        self.assertTrue(is_identity(params.color_matrix))
        self.assertEqual(params.flip, FlipMode.NONE)
        self.assertEqual(params.rotation, 0.0)


class TestCrop(unittest.TestCase):
    """Test ImageCrop parsing."""

    def test_full_crop(self):
        params = _read({"ImageCrop": "1, 2, 30, 40, 4"})

        self.assertEqual(params.crop, CropRect(1, 2, 30, 40))
        self.assertEqual(params.crop_anchor, CropAnchor.CENTER)

    def test_missing_anchor_defaults_top_left(self):
        params = _read({"ImageCrop": "0,0,10,10"})

        self.assertEqual(params.crop_anchor, CropAnchor.TOP_LEFT)

    def test_missing_fields_keep_disabled_value(self):
        """Test a crop with only x and y stays disabled."""
        params = _read({"ImageCrop": "5,5"})

        self.assertEqual(params.crop, CropRect(5, 5, -1, -1))
        self.assertFalse(params.crop.is_set)

    def test_no_comma_leaves_crop_disabled(self):
        self.assertEqual(_read({"ImageCrop": "10"}).crop, DISABLED_CROP)

    def test_non_numeric_token_reads_zero(self):
        self.assertEqual(_read({"ImageCrop": "a,3px,10,10"}).crop, CropRect(0, 3, 10, 10))

    def test_invalid_anchor_raises_error(self):
        """Test anchor index 9 raises a ConfigError naming key and section."""
        with self.assertRaises(ConfigError) as context:
            _read({"ImageCrop": "0,0,10,10,9"})

        error = context.exception
        self.assertEqual(error.key, "ImageCrop")
        self.assertEqual(error.value, "0,0,10,10,9")
        self.assertEqual(error.section, SECTION)
        self.assertIn("ImageCrop", str(error))
        self.assertIn(f"[{SECTION}]", str(error))

    def test_negative_anchor_raises_error(self):
        with self.assertRaises(ConfigError):
            _read({"ImageCrop": "0,0,10,10,-1"})


class TestTint(unittest.TestCase):
    """Test greyscale, tint, alpha and matrix rows."""

    def test_greyscale(self):
        self.assertTrue(_read({"Greyscale": "1"}).greyscale)
        self.assertFalse(_read({"Greyscale": "0"}).greyscale)

    def test_tint_fills_diagonal(self):
        """Test tint channels become the diagonal of rows 1-3."""
        matrix = _read({"ImageTint": "255,128,0"}).color_matrix

        self.assertAlmostEqual(float(matrix[0, 0]), 1.0)
        self.assertAlmostEqual(float(matrix[1, 1]), 128 / 255, places=6)
        self.assertAlmostEqual(float(matrix[2, 2]), 0.0)
        self.assertAlmostEqual(float(matrix[3, 3]), 1.0)

    def test_legacy_alpha_from_tint(self):
        """Test alpha 128 from ImageTint lands in row 4 when ColorMatrix4 is absent."""
        matrix = _read({"ImageTint": "FFFFFF80"}).color_matrix

        self.assertAlmostEqual(float(matrix[3, 3]), 128 / 255, delta=1e-6)

    def test_image_alpha_overrides_tint_alpha(self):
        matrix = _read({"ImageTint": "255,255,255,128", "ImageAlpha": "64"}).color_matrix

        self.assertAlmostEqual(float(matrix[3, 3]), 64 / 255, delta=1e-6)

    def test_image_alpha_clamped(self):
        self.assertAlmostEqual(float(_read({"ImageAlpha": "400"}).color_matrix[3, 3]), 1.0)
        self.assertAlmostEqual(float(_read({"ImageAlpha": "-4"}).color_matrix[3, 3]), 0.0)

    def test_matrix_row_overrides_tint(self):
        """Test a five-float row replaces the tint fallback of that row."""
        matrix = _read({
            "ImageTint": "0,0,0",
            "ColorMatrix1": "0.2;0.3;0.4;0.5;0.9",
        }).color_matrix

        self.assertEqual([round(float(v), 6) for v in matrix[0, :4]], [0.2, 0.3, 0.4, 0.5])
        self.assertEqual(float(matrix[0, 4]), 0.0)
        self.assertEqual(float(matrix[1, 1]), 0.0)

    def test_short_row_falls_back(self):
        matrix = _read({"ColorMatrix2": "1;1;1", "ImageTint": "0,0,0"}).color_matrix

        self.assertEqual(float(matrix[1, 0]), 0.0)
        self.assertEqual(float(matrix[1, 1]), 0.0)

    def test_fifth_row(self):
        """Test ColorMatrix5 sets the translation row and keeps column 5 at 1."""
        matrix = _read({"ColorMatrix5": "0.1;0.2;0.3;0;0"}).color_matrix

        self.assertAlmostEqual(float(matrix[4, 0]), 0.1, places=6)
        self.assertEqual(float(matrix[4, 4]), 1.0)


class TestFlip(unittest.TestCase):
    """Test ImageFlip parsing."""

    def test_keywords(self):
        self.assertEqual(_read({"ImageFlip": "horizontal"}).flip, FlipMode.HORIZONTAL)
        self.assertEqual(_read({"ImageFlip": "Vertical"}).flip, FlipMode.VERTICAL)
        self.assertEqual(_read({"ImageFlip": "BOTH"}).flip, FlipMode.BOTH)
        self.assertEqual(_read({"ImageFlip": "none"}).flip, FlipMode.NONE)

    def test_invalid_keyword_raises_error(self):
        """Test ImageFlip=DIAGONAL raises a ConfigError naming key and section."""
        with self.assertRaises(ConfigError) as context:
            _read({"ImageFlip": "DIAGONAL"})

        self.assertEqual(context.exception.key, "ImageFlip")
        self.assertEqual(context.exception.section, SECTION)
        self.assertIn("ImageFlip=DIAGONAL", str(context.exception))


class TestRotationAndDisable(unittest.TestCase):
    """Test ImageRotate and disable_transform."""

    def test_rotation(self):
        self.assertEqual(_read({"ImageRotate": "-30.5"}).rotation, -30.5)

    def test_non_finite_rotation_reads_as_zero(self):
        """Test inf, -inf and nan rotations fall back to no rotation."""
        for value in ("inf", "-inf", "nan"):
            params = _read({"ImageRotate": value})

            self.assertEqual(params.rotation, 0.0)
            self.assertFalse(params.needs_transform)

    def test_non_finite_matrix_row_falls_back(self):
        matrix = _read({"ColorMatrix1": "nan;0;0;0;0", "ImageTint": "0,0,0"}).color_matrix

        self.assertEqual(float(matrix[0, 0]), 0.0)

    def test_disable_transform_ignores_crop_and_rotate(self):
        binder = ConfigBinder(disable_transform=True)

        params = _read({"ImageCrop": "0,0,10,10,9", "ImageRotate": "90", "ImageFlip": "BOTH"}, binder)

        self.assertEqual(params.crop, DISABLED_CROP)
        self.assertEqual(params.rotation, 0.0)
        self.assertEqual(params.flip, FlipMode.BOTH)


class TestConfigKeys(unittest.TestCase):
    """Test prefixed key names."""

    def test_default_names(self):
        keys = ConfigKeys()

        self.assertEqual(keys.image_crop, "ImageCrop")
        self.assertEqual(keys.color_matrix_rows[-1], "ColorMatrix5")

    def test_prefix(self):
        keys = ConfigKeys.with_prefix("Mask")

        self.assertEqual(keys.image_name, "MaskImageName")
        self.assertEqual(keys.greyscale, "MaskGreyscale")
        self.assertEqual(keys.color_matrix_rows[0], "MaskColorMatrix1")

    def test_binder_reads_prefixed_keys(self):
        binder = ConfigBinder(ConfigKeys.with_prefix("Mask"))

        params = _read({"Greyscale": "0", "MaskGreyscale": "1", "MaskImageFlip": "BOTH"}, binder)

        self.assertTrue(params.greyscale)
        self.assertEqual(params.flip, FlipMode.BOTH)


if __name__ == "__main__":
    unittest.main()
