"""
Tinted Image Nodes Library.

This module exposes the tinted image pipeline as pipeline nodes.

Modules:
    node_executors: Registry mapping node types to executor functions
    tinted_image_node: Tinted Image source node and Image Adjust node
"""

from TI_Libs.NodesLib.node_executors import (
    NodeExecutorRegistry,
    get_default_registry,
    register_default_executors,
)
from TI_Libs.NodesLib.tinted_image_node import (
    clear_tinted_image_slots,
    create_tinted_image_node,
    execute_image_adjust_node,
    execute_tinted_image_node,
    release_tinted_image_slot,
)

__all__ = [
    "NodeExecutorRegistry",
    "get_default_registry",
    "register_default_executors",
    "clear_tinted_image_slots",
    "create_tinted_image_node",
    "execute_image_adjust_node",
    "execute_tinted_image_node",
    "release_tinted_image_slot",
]
