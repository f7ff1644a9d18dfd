"""
Image loading for Tinted Image.

This module reads image files into memory, decodes them and decides whether
a file needs to be reloaded at all by comparing its modification time with
the one recorded for the currently loaded image.

Classes:
    LoadOutcome: What a load call did
    LoadResult: Outcome plus the resulting source image
    ImageLoader: Loads SourceImage objects from disk

Functions:
    resolve_image_path: Apply the default extension and base directory
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from TI_Libs.constants import DEFAULT_CONFIG_NAME, DEFAULT_IMAGE_EXTENSION
from TI_Libs.ImageEditingLib.image_editing_ops import decode_image
from TI_Libs.ImageEditingLib.image_models import SourceImage
from TI_Libs.pillow_compat import DecompressionBombError

logger = logging.getLogger(__name__)


class LoadOutcome(Enum):
    DISPOSED = "disposed"    # no image name, slot emptied
    FAILED = "failed"        # open or decode failed, slot emptied
    UNCHANGED = "unchanged"  # same timestamp, nothing read
    LOADED = "loaded"        # new image decoded


@dataclass(frozen=True)
class LoadResult:
    outcome: LoadOutcome
    source: Optional[SourceImage] = None
    message: str = ""

    @property
    def reloaded(self) -> bool:
        return self.outcome == LoadOutcome.LOADED


def resolve_image_path(
    image_name: str,
    base_dir: Optional[Path] = None,
    default_extension: str = DEFAULT_IMAGE_EXTENSION,
) -> Path:
    """
    Turn a configured image name into a file path.

    A name whose last path component has no extension gets the default
    extension appended. Relative names resolve against base_dir when given.

    Args:
        image_name: Image name as written in the configuration
        base_dir: Directory relative names are resolved against
        default_extension: Extension appended when the name has none

    Returns:
        The resolved Path
    """
    path = Path(image_name)
    if "." not in path.name:
        path = path.with_name(path.name + default_extension)

    if base_dir is not None and not path.is_absolute():
        path = Path(base_dir) / path

    return path


class ImageLoader:
    """
    Loads source images, skipping files whose timestamp has not changed.

    The loader holds no image state; the caller passes in its current
    SourceImage and keeps whatever comes back in the LoadResult. I/O and
    decode failures are logged and reported as FAILED, never raised.

    Attributes:
        base_dir: Directory relative image names are resolved against
        default_extension: Extension appended to names without one
    """

    def __init__(
        self,
        base_dir: Optional[Union[str, Path]] = None,
        default_extension: str = DEFAULT_IMAGE_EXTENSION,
    ):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.default_extension = default_extension

    def load(
        self,
        image_name: str,
        current: Optional[SourceImage] = None,
        force_reload: bool = False,
        config_name: str = DEFAULT_CONFIG_NAME,
    ) -> LoadResult:
        """
        Load an image unless the loaded one is still current.

        Args:
            image_name: Configured image name; empty means "no image"
            current: The currently loaded image, if any
            force_reload: Reload even when the timestamp is unchanged
            config_name: Logical name of the image used in log messages

        Returns:
            LoadResult describing what happened
        """
        if not image_name:
            return LoadResult(LoadOutcome.DISPOSED)

        path = resolve_image_path(image_name, self.base_dir, self.default_extension)

        try:
            with open(path, "rb") as handle:
                modified = os.fstat(handle.fileno()).st_mtime_ns

                if (
                    not force_reload
                    and current is not None
                    and current.path == path
                    and current.modified == modified
                ):
                    logger.debug(f"{config_name} unchanged, skipping reload: {path}")
                    return LoadResult(LoadOutcome.UNCHANGED, current)

                buffer = handle.read()
        except OSError as e:
            message = f"Unable to open {config_name}: {path}"
            logger.error(f"{message} ({e})")
            return LoadResult(LoadOutcome.FAILED, message=message)

        try:
            bitmap = decode_image(buffer)
        except (OSError, ValueError, DecompressionBombError) as e:
            message = f"Unable to load {config_name}: {path}"
            logger.error(f"{message} ({e})")
            return LoadResult(LoadOutcome.FAILED, message=message)

        logger.debug(f"Loaded {config_name}: {path} ({bitmap.width}x{bitmap.height})")
        return LoadResult(
            LoadOutcome.LOADED,
            SourceImage(path=path, bitmap=bitmap, buffer=buffer, modified=modified),
        )
