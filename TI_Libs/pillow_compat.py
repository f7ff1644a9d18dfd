"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace).

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the library uses: the `Image` module, the `ImageClass` type used in
hints and `DecompressionBombError`, which Pillow raises outside the OSError
hierarchy. Library modules import from `pillow_compat` so that a missing Pillow
install fails in one place with a clear message.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")

if _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

# Provide a small helper for type hints referencing PIL.Image.Image
ImageClass = _pil_image.Image

# Raised by Image.open for images over Image.MAX_IMAGE_PIXELS * 2
DecompressionBombError = _pil_image.DecompressionBombError
