"""
Tinted image slot.

A TintedImage owns one source image and the image derived from it by the
crop, tint and transform pipeline. It reads its parameters from a config
source, reloads the file only when its timestamp changes and re-derives the
output only when parameters or the source changed.

Classes:
    TintedImage: Config-bound image slot
"""

import logging
from typing import Any, Optional

from TI_Libs.constants import DEFAULT_CONFIG_NAME
from TI_Libs.ConfigLib.config_binder import DEFAULT_CONFIG_KEYS, ConfigBinder, ConfigKeys
from TI_Libs.ConfigLib.config_source import ConfigSource
from TI_Libs.ImageEditingLib.change_tracker import ChangeTracker
from TI_Libs.ImageEditingLib.image_loader import ImageLoader, LoadOutcome
from TI_Libs.ImageEditingLib.image_models import DirtyFlags, ImageParameters, SourceImage
from TI_Libs.ImageEditingLib.transform_pipeline import TransformPipeline

logger = logging.getLogger(__name__)


class TintedImage:
    """
    A config-bound image slot with cached transformed output.

    Typical use is one read_config() followed by load_image() every time the
    configuration is (re)read:

        >>> image = TintedImage("Image")
        >>> image.read_config(IniConfigSource.from_file("skin.ini"), "Meter")
        >>> image.load_image("background")
        >>> bitmap = image.get_image()

    Attributes:
        name: Logical name used in log messages
        binder: Reads parameters from the config source
        loader: Loads the source file
        tracker: Holds parameters and pending dirty flags
        pipeline: Crop, tint and transform stages
    """

    def __init__(
        self,
        name: str = DEFAULT_CONFIG_NAME,
        keys: Optional[ConfigKeys] = None,
        disable_transform: bool = False,
        loader: Optional[ImageLoader] = None,
    ):
        self.name = name or DEFAULT_CONFIG_NAME
        self.binder = ConfigBinder(keys or DEFAULT_CONFIG_KEYS, disable_transform)
        self.loader = loader if loader is not None else ImageLoader()
        self.tracker = ChangeTracker()
        self.pipeline = TransformPipeline()

        self._source: Optional[SourceImage] = None
        self._derived: Optional[Any] = None

    @property
    def parameters(self) -> ImageParameters:
        return self.tracker.parameters

    @property
    def flags(self) -> DirtyFlags:
        return self.tracker.flags

    @property
    def source(self) -> Optional[SourceImage]:
        return self._source

    @property
    def derived(self) -> Optional[Any]:
        return self._derived

    def read_config(self, source: ConfigSource, section: str) -> DirtyFlags:
        """
        Read parameters from a config section and flag changed stages.

        Raises:
            ConfigError: If a value is invalid; parameters and flags are left
                as they were
        """
        parameters = self.binder.read_parameters(source, section)
        return self.tracker.update(parameters)

    def read_image_name(self, source: ConfigSource, section: str) -> str:
        return source.read_string(section, self.binder.keys.image_name, "")

    def load_image(self, image_name: str, load_always: bool = False) -> LoadOutcome:
        """
        Load the image (if changed) and re-derive the output (if needed).

        An empty name disposes the current image. Open and decode failures
        are logged by the loader and leave the slot empty.

        Args:
            image_name: Configured image name
            load_always: Reload even when the file timestamp is unchanged

        Returns:
            The LoadOutcome of the load step
        """
        result = self.loader.load(image_name, self._source, load_always, self.name)

        if result.outcome in (LoadOutcome.DISPOSED, LoadOutcome.FAILED):
            if self.is_loaded():
                self.dispose()
            return result.outcome

        if result.reloaded:
            self.dispose()
            self._source = result.source
            self.tracker.image_reloaded()

        if self.flags.any():
            self._apply_pipeline()

        return result.outcome

    def _apply_pipeline(self) -> None:
        source = self._source

        if source.is_degenerate:
            logger.debug(f"{self.name} has no area, skipping transform stages")
            self._derived = None
        else:
            self._derived = self.pipeline.run(source.bitmap, self.parameters, self.flags)

        self.tracker.clear()

    def get_image(self) -> Optional[Any]:
        """Return the derived image if one exists, else the source bitmap."""
        if self._derived is not None:
            return self._derived
        if self._source is not None:
            return self._source.bitmap
        return None

    def is_loaded(self) -> bool:
        return self._source is not None

    def dispose(self) -> None:
        """Drop the source and derived images."""
        self._source = None
        self._derived = None
        self.pipeline.reset()
