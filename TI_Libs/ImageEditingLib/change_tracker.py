"""
Change tracking for the transform pipeline.

Decides which pipeline stages must re-run by comparing parameter sets read
from configuration, and by checking which stages a freshly loaded image
needs. Flags are recomputed as new DirtyFlags values rather than mutated.

Classes:
    ChangeTracker: Holds the current parameters and the pending dirty flags
"""

import logging
from typing import Optional

from TI_Libs.ImageEditingLib import color_matrix
from TI_Libs.ImageEditingLib.image_models import (
    CLEAN_FLAGS,
    DirtyFlags,
    ImageParameters,
)

logger = logging.getLogger(__name__)


class ChangeTracker:
    """
    Track parameter changes between configuration reads.

    Pending flags accumulate until clear() is called after a successful
    pipeline pass, so a change seen while no image could be loaded is still
    applied on the next attempt.

    Example:
        >>> tracker = ChangeTracker()
        >>> tracker.update(ImageParameters(greyscale=True))
        >>> tracker.flags.needs_tint
        True
        >>> tracker.clear()
        >>> tracker.flags.any()
        False
    """

    def __init__(self, parameters: Optional[ImageParameters] = None):
        self.parameters = parameters if parameters is not None else ImageParameters()
        self.flags = CLEAN_FLAGS

    @staticmethod
    def diff(old: ImageParameters, new: ImageParameters) -> DirtyFlags:
        """
        Compute which stages are affected by a parameter change.

        Args:
            old: Parameters from the previous configuration read
            new: Parameters from the current configuration read

        Returns:
            DirtyFlags with one flag per affected stage
        """
        return DirtyFlags(
            needs_crop=old.crop != new.crop or old.crop_anchor != new.crop_anchor,
            needs_tint=(
                old.greyscale != new.greyscale
                or not color_matrix.equals(old.color_matrix, new.color_matrix)
            ),
            needs_transform=old.flip != new.flip or old.rotation != new.rotation,
        )

    @staticmethod
    def fresh_image(parameters: ImageParameters) -> DirtyFlags:
        """Stages a newly loaded image needs under the given parameters."""
        return DirtyFlags(
            needs_crop=parameters.needs_crop,
            needs_tint=parameters.needs_tint,
            needs_transform=parameters.needs_transform,
        )

    def update(self, parameters: ImageParameters) -> DirtyFlags:
        """
        Record a new parameter set and merge its changes into the pending flags.

        Returns:
            The pending flags after the update
        """
        changes = self.diff(self.parameters, parameters)
        self.parameters = parameters
        self.flags = self.flags.merged(changes)
        if changes.any():
            logger.debug(f"Parameters changed: {changes}")
        return self.flags

    def image_reloaded(self) -> DirtyFlags:
        """Mark every non-trivial stage dirty after a (re)load."""
        self.flags = self.flags.merged(self.fresh_image(self.parameters))
        return self.flags

    def clear(self) -> None:
        """Clear all three flags together after a full pipeline pass."""
        self.flags = CLEAN_FLAGS
