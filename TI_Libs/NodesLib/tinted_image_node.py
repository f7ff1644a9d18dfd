"""
Tinted Image nodes.

Exposes the tinted image pipeline to a node-based image pipeline. Node
dictionaries carry the same keys as a configuration section (ImageName,
ImageCrop, Greyscale, ImageTint, ...), so a node is read exactly like a
config section named after the node id.

Functions:
    execute_tinted_image_node: Source node that loads and transforms an image
    execute_image_adjust_node: Processing node that transforms an input image
    create_tinted_image_node: Build a Tinted Image node dictionary
    release_tinted_image_slot: Drop the cached image slot of one node
    clear_tinted_image_slots: Drop all cached image slots
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from TI_Libs.constants import (
    COLOR_SEPARATOR,
    DEFAULT_FLIP,
    FIELD_BASE_DIR,
    FIELD_DISABLE_TRANSFORM,
    FIELD_KEY_PREFIX,
    FIELD_LOAD_ALWAYS,
    FIELD_NODE_ID,
    FIELD_NODE_TYPE,
    FLOATS_SEPARATOR,
    NODE_TYPE_TINTED_IMAGE,
)
from TI_Libs.ConfigLib.config_binder import ConfigBinder, ConfigKeys
from TI_Libs.ConfigLib.config_source import DictConfigSource
from TI_Libs.ImageEditingLib.change_tracker import ChangeTracker
from TI_Libs.ImageEditingLib.image_editing_ops import is_empty
from TI_Libs.ImageEditingLib.image_loader import ImageLoader
from TI_Libs.ImageEditingLib.image_models import CropAnchor, RgbaColor
from TI_Libs.ImageEditingLib.transform_pipeline import TransformPipeline
from TI_Libs.tinted_image import TintedImage

logger = logging.getLogger(__name__)

# node id -> (slot settings, slot). Entries stay until released or cleared.
_slots: Dict[str, Tuple[Tuple[Any, ...], TintedImage]] = {}


def _node_id(node: Dict[str, Any]) -> str:
    node_id = str(node.get(FIELD_NODE_ID, node.get("node_id", ""))).strip()
    if not node_id:
        raise KeyError("Tinted image node missing required 'id' field")
    return node_id


def _node_keys(node: Dict[str, Any]) -> ConfigKeys:
    return ConfigKeys.with_prefix(str(node.get(FIELD_KEY_PREFIX, "")))


def _get_slot(node_id: str, node: Dict[str, Any]) -> TintedImage:
    settings = (
        str(node.get(FIELD_KEY_PREFIX, "")),
        bool(node.get(FIELD_DISABLE_TRANSFORM, False)),
        node.get(FIELD_BASE_DIR),
    )

    cached = _slots.get(node_id)
    if cached is not None and cached[0] == settings:
        return cached[1]

    if cached is not None:
        cached[1].dispose()

    prefix, disable_transform, base_dir = settings
    slot = TintedImage(
        name=node_id,
        keys=ConfigKeys.with_prefix(prefix),
        disable_transform=disable_transform,
        loader=ImageLoader(base_dir=base_dir),
    )
    _slots[node_id] = (settings, slot)
    logger.debug(f"Created image slot for node: {node_id}")
    return slot


def release_tinted_image_slot(node_id: str) -> bool:
    """
    Drop the cached image slot of a node that left the pipeline.

    Returns:
        True if a slot was dropped, False if the node had none
    """
    cached = _slots.pop(str(node_id).strip(), None)
    if cached is None:
        return False
    cached[1].dispose()
    logger.debug(f"Released image slot for node: {node_id}")
    return True


def clear_tinted_image_slots() -> None:
    """Drop all cached image slots and the images they hold."""
    for _, slot in _slots.values():
        slot.dispose()
    _slots.clear()


def execute_tinted_image_node(node: Dict[str, Any], inputs: List[Any]) -> Any:
    """
    Pipeline executor for Tinted Image nodes.

    Image slots are kept per node id, so executing the same node again only
    reloads the file when its timestamp changed and only re-runs the stages
    whose parameters changed. A slot is kept until release_tinted_image_slot()
    or clear_tinted_image_slots() is called; changing the key prefix,
    disable_transform or base_dir of a node replaces its slot.

    Args:
        node: Node dictionary containing:
            - 'id': Node identifier (required)
            - '<prefix>ImageName' and the other image keys
            - 'key_prefix': Prefix of the image keys (default "")
            - 'disable_transform': Ignore crop and rotation (default False)
            - 'load_always': Reload even if the file is unchanged (default False)
            - 'base_dir': Directory relative image names resolve against
        inputs: Should be empty (source node)

    Returns:
        PIL Image, or None when no image could be loaded

    Raises:
        KeyError: If the node has no id
        ConfigError: If the crop anchor or flip keyword is invalid
    """
    node_id = _node_id(node)
    slot = _get_slot(node_id, node)
    source = DictConfigSource({node_id: node})

    slot.read_config(source, node_id)
    slot.load_image(
        slot.read_image_name(source, node_id),
        load_always=bool(node.get(FIELD_LOAD_ALWAYS, False)),
    )
    return slot.get_image()


def execute_image_adjust_node(node: Dict[str, Any], inputs: List[Any]) -> Any:
    """
    Pipeline executor for Image Adjust nodes.

    Applies every non-trivial stage to the input image. Nothing is cached
    between executions.

    Args:
        node: Node dictionary with the image keys (see execute_tinted_image_node)
        inputs: Should contain exactly one element: the input PIL Image

    Returns:
        Transformed PIL Image (the input itself when no stage applies)

    Raises:
        ValueError: If inputs list is empty
        TypeError: If input is not a PIL Image
        ConfigError: If the crop anchor or flip keyword is invalid
    """
    if not inputs:
        raise ValueError("Image adjust node requires 1 input image")

    image = inputs[0]
    if not hasattr(image, "size") or not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    section = str(node.get(FIELD_NODE_ID, "adjust"))
    binder = ConfigBinder(_node_keys(node), bool(node.get(FIELD_DISABLE_TRANSFORM, False)))
    params = binder.read_parameters(DictConfigSource({section: node}), section)

    if is_empty(image):
        return image

    derived = TransformPipeline().run(image, params, ChangeTracker.fresh_image(params))
    return derived if derived is not None else image


def create_tinted_image_node(
    node_id: str,
    image_name: str,
    crop: Optional[Tuple[int, int, int, int]] = None,
    crop_anchor: CropAnchor = CropAnchor.TOP_LEFT,
    greyscale: bool = False,
    tint: Optional[RgbaColor] = None,
    alpha: Optional[int] = None,
    color_matrix: Optional[Sequence[Sequence[float]]] = None,
    flip: str = DEFAULT_FLIP,
    rotation: float = 0.0,
    key_prefix: str = "",
) -> Dict[str, Any]:
    """
    Helper to create a Tinted Image node dictionary.

    Args:
        node_id: Unique node identifier
        image_name: Image file name (".png" is appended when it has no extension)
        crop: (x, y, width, height) crop rectangle, or None for no crop
        crop_anchor: Anchor the crop offset is relative to
        greyscale: Convert to greyscale before tinting
        tint: RGBA tint color
        alpha: Alpha override (0-255)
        color_matrix: Up to five rows of five floats overriding the tint
        flip: NONE, HORIZONTAL, VERTICAL or BOTH
        rotation: Clockwise rotation in degrees
        key_prefix: Prefix applied to every image key

    Returns:
        Node dictionary ready for execution
    """
    keys = ConfigKeys.with_prefix(key_prefix)
    node: Dict[str, Any] = {
        FIELD_NODE_ID: node_id,
        FIELD_NODE_TYPE: NODE_TYPE_TINTED_IMAGE,
        FIELD_KEY_PREFIX: key_prefix,
        keys.image_name: image_name,
        keys.greyscale: 1 if greyscale else 0,
        keys.image_flip: flip,
        keys.image_rotate: rotation,
    }

    if crop is not None:
        x, y, width, height = crop
        node[keys.image_crop] = f"{x},{y},{width},{height},{int(crop_anchor)}"

    if tint is not None:
        node[keys.image_tint] = COLOR_SEPARATOR.join(str(channel) for channel in tint)

    if alpha is not None:
        node[keys.image_alpha] = alpha

    if color_matrix is not None:
        for key, row in zip(keys.color_matrix_rows, color_matrix):
            node[key] = FLOATS_SEPARATOR.join(str(value) for value in row)

    return node
