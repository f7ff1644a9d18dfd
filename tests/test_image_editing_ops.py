"""
Unit tests for image_editing_ops module.

Tests the bitmap operations the pipeline is built on: decoding, crop
origins and regions, color matrix rendering, flipping and rotation.
"""

import io
import unittest

import numpy as np
from PIL import Image

from TI_Libs.ImageEditingLib.color_matrix import GREYSCALE_MATRIX, IDENTITY_MATRIX, identity_matrix
from TI_Libs.ImageEditingLib.image_editing_ops import (
    apply_color_matrix,
    crop_origin,
    decode_image,
    draw_image_region,
    flip_image,
    is_empty,
    new_bitmap,
    rotate_image,
    rotated_bounds,
)
from TI_Libs.ImageEditingLib.image_models import CropAnchor, CropRect, FlipMode


def _png_bytes(image):
    stream = io.BytesIO()
    image.save(stream, format="PNG")
    return stream.getvalue()


class TestDecodeImage(unittest.TestCase):
    """Test decoding from memory."""

    def test_decodes_png_to_rgba(self):
        """Test an RGB PNG is decoded into an RGBA bitmap."""
        buffer = _png_bytes(Image.new("RGB", (8, 4), (10, 20, 30)))

        image = decode_image(buffer)

        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(image.size, (8, 4))
        self.assertEqual(image.getpixel((0, 0)), (10, 20, 30, 255))

    def test_empty_buffer_raises_error(self):
        """Test an empty buffer is rejected."""
        with self.assertRaises(ValueError):
            decode_image(b"")

    def test_garbage_raises_oserror(self):
        """Test data that is not an image raises OSError."""
        with self.assertRaises(OSError):
            decode_image(b"definitely not an image")


class TestBitmaps(unittest.TestCase):
    """Test bitmap allocation helpers."""

    def test_new_bitmap_is_transparent(self):
        """Test new bitmaps are fully transparent RGBA."""
        image = new_bitmap(3, 2)

        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(image.getpixel((2, 1)), (0, 0, 0, 0))

    def test_is_empty(self):
        """Test zero width or height counts as empty."""
        self.assertTrue(is_empty(new_bitmap(0, 0)))
        self.assertTrue(is_empty(new_bitmap(5, 0)))
        self.assertFalse(is_empty(new_bitmap(1, 1)))


class TestCropOrigin(unittest.TestCase):
    """Test crop anchor resolution."""

    def setUp(self):
        self.crop = CropRect(0, 0, 10, 10)

    def test_top_left(self):
        self.assertEqual(crop_origin(self.crop, CropAnchor.TOP_LEFT, 100, 50), (0, 0))

    def test_top_right(self):
        self.assertEqual(crop_origin(self.crop, CropAnchor.TOP_RIGHT, 100, 50), (100, 0))

    def test_bottom_right(self):
        """Test bottom right anchor yields (W, H)."""
        self.assertEqual(crop_origin(self.crop, CropAnchor.BOTTOM_RIGHT, 100, 50), (100, 50))

    def test_bottom_left(self):
        self.assertEqual(crop_origin(self.crop, CropAnchor.BOTTOM_LEFT, 100, 50), (0, 50))

    def test_center(self):
        """Test center anchor yields (W/2, H/2)."""
        self.assertEqual(crop_origin(self.crop, CropAnchor.CENTER, 100, 50), (50, 25))

    def test_offset_is_added(self):
        """Test the configured offset is combined with the anchor."""
        crop = CropRect(-10, -5, 10, 5)

        self.assertEqual(crop_origin(crop, CropAnchor.BOTTOM_RIGHT, 100, 50), (90, 45))


class TestDrawImageRegion(unittest.TestCase):
    """Test region copies."""

    def setUp(self):
        self.image = Image.new("RGBA", (4, 4), (255, 0, 0, 255))

    def test_region_inside_source(self):
        """Test a region inside the source copies its pixels."""
        region = draw_image_region(self.image, 1, 1, 2, 2)

        self.assertEqual(region.size, (2, 2))
        self.assertEqual(region.getpixel((0, 0)), (255, 0, 0, 255))

    def test_region_outside_source_is_transparent(self):
        """Test pixels beyond the source extent are transparent."""
        region = draw_image_region(self.image, 2, 2, 4, 4)

        self.assertEqual(region.size, (4, 4))
        self.assertEqual(region.getpixel((0, 0)), (255, 0, 0, 255))
        self.assertEqual(region.getpixel((3, 3)), (0, 0, 0, 0))


class TestApplyColorMatrix(unittest.TestCase):
    """Test color matrix rendering."""

    def test_identity_keeps_pixels(self):
        """Test the identity matrix leaves pixels unchanged."""
        image = Image.new("RGBA", (2, 2), (12, 34, 56, 78))

        result = apply_color_matrix(image, IDENTITY_MATRIX)

        self.assertEqual(result.getpixel((1, 1)), (12, 34, 56, 78))
        self.assertIsNot(result, image)

    def test_greyscale_uses_luma(self):
        """Test the greyscale matrix writes luma to every color channel."""
        image = Image.new("RGBA", (1, 1), (200, 100, 50, 128))
        luma = 0.299 * 200 + 0.587 * 100 + 0.114 * 50

        r, g, b, a = apply_color_matrix(image, GREYSCALE_MATRIX).getpixel((0, 0))

        for channel in (r, g, b):
            self.assertAlmostEqual(channel, luma, delta=1)
        self.assertEqual(a, 128)

    def test_alpha_scaling(self):
        """Test the alpha diagonal scales alpha only."""
        matrix = identity_matrix()
        matrix[3, 3] = 0.5
        image = Image.new("RGBA", (1, 1), (100, 100, 100, 200))

        self.assertEqual(apply_color_matrix(image, matrix).getpixel((0, 0)), (100, 100, 100, 100))

    def test_translation_row_and_clipping(self):
        """Test the fifth row adds a constant and results are clipped."""
        matrix = identity_matrix()
        matrix[4, 0] = 1.0
        image = Image.new("RGBA", (1, 1), (100, 0, 0, 255))

        self.assertEqual(apply_color_matrix(image, matrix).getpixel((0, 0)), (255, 0, 0, 255))

    def test_rgb_input_is_converted(self):
        """Test non-RGBA input is converted first."""
        image = Image.new("RGB", (2, 1), (1, 2, 3))

        result = apply_color_matrix(image, IDENTITY_MATRIX)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getpixel((0, 0)), (1, 2, 3, 255))


class TestFlipImage(unittest.TestCase):
    """Test non-mutating flips."""

    def setUp(self):
        self.image = Image.new("RGBA", (2, 2), (0, 0, 0, 255))
        self.image.putpixel((0, 0), (255, 0, 0, 255))

    def test_horizontal(self):
        self.assertEqual(flip_image(self.image, FlipMode.HORIZONTAL).getpixel((1, 0)), (255, 0, 0, 255))

    def test_vertical(self):
        self.assertEqual(flip_image(self.image, FlipMode.VERTICAL).getpixel((0, 1)), (255, 0, 0, 255))

    def test_both(self):
        self.assertEqual(flip_image(self.image, FlipMode.BOTH).getpixel((1, 1)), (255, 0, 0, 255))

    def test_source_untouched(self):
        """Test the input image is never modified."""
        flip_image(self.image, FlipMode.BOTH)

        self.assertEqual(self.image.getpixel((0, 0)), (255, 0, 0, 255))

    def test_none_returns_copy(self):
        """Test NONE returns an equal but separate image."""
        result = flip_image(self.image, FlipMode.NONE)

        self.assertIsNot(result, self.image)
        self.assertEqual(list(result.getdata()), list(self.image.getdata()))


class TestRotation(unittest.TestCase):
    """Test rotated bounds and rotation."""

    def test_bounds_90_degrees(self):
        """Test a 100x50 image rotated 90 degrees needs a 50x100 canvas."""
        width, height = rotated_bounds(100, 50, 90)

        self.assertLessEqual(abs(width - 50), 1)
        self.assertLessEqual(abs(height - 100), 1)

    def test_bounds_zero_degrees(self):
        self.assertEqual(rotated_bounds(100, 50, 0), (100, 50))

    def test_bounds_45_degrees(self):
        """Test the bounding box of a square rotated 45 degrees."""
        expected = int(10 * np.sqrt(2) + 0.5)

        self.assertEqual(rotated_bounds(10, 10, 45), (expected, expected))

    def test_rotate_grows_canvas(self):
        """Test rotation returns an RGBA image of the rotated bounds."""
        image = Image.new("RGBA", (100, 50), (0, 255, 0, 255))

        result = rotate_image(image, 90)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.size, rotated_bounds(100, 50, 90))
        self.assertEqual(result.getpixel((25, 50))[3], 255)

    def test_rotate_corners_transparent(self):
        """Test canvas area outside the rotated image is transparent."""
        image = Image.new("RGBA", (40, 40), (0, 0, 255, 255))

        result = rotate_image(image, 45)

        self.assertEqual(result.getpixel((0, 0))[3], 0)
        r, g, b, a = result.getpixel((result.width // 2, result.height // 2))
        self.assertGreater(b, 250)
        self.assertGreater(a, 250)

    def test_rotate_clockwise(self):
        """Test positive angles rotate clockwise."""
        image = Image.new("RGBA", (20, 10), (0, 0, 0, 255))
        for y in range(10):
            for x in range(15, 20):
                image.putpixel((x, y), (255, 0, 0, 255))

        result = rotate_image(image, 90)

        # The right edge of the source ends up at the bottom.
        self.assertGreater(result.getpixel((5, 17))[0], 200)
        self.assertLess(result.getpixel((5, 2))[0], 50)


if __name__ == "__main__":
    unittest.main()
