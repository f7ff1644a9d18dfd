"""
Pytest configuration and shared fixtures for Tinted Image tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image


@pytest.fixture
def image_dir(tmp_path):
    """
    Provide a temporary directory for image files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def write_png(image_dir):
    """
    Provide a helper that saves a PNG into the image directory.

    Returns:
        Callable (name, size, color) -> Path of the written file
    """
    def _write(name="source.png", size=(64, 64), color=(200, 100, 50, 255)):
        path = image_dir / name
        Image.new("RGBA", size, color).save(path)
        return path

    return _write

