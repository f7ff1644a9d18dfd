"""
Node executor registry for Tinted Image nodes.

Maps the "Tinted Image" and "Image Adjust" node types to their executor
functions so a node dictionary can be run by type name.

Classes:
    NodeExecutorRegistry: Node type -> (executor, required input count)

Functions:
    get_default_registry: Registry holding the built-in nodes (singleton)
    register_default_executors: Register the built-in nodes
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from TI_Libs.constants import NODE_TYPE_IMAGE_ADJUST, NODE_TYPE_TINTED_IMAGE

logger = logging.getLogger(__name__)

ExecutorFunction = Callable[[Dict[str, Any], List[Any]], Any]


class NodeExecutorRegistry:
    """
    Runs node dictionaries by node type.

    Example:
        >>> registry = get_default_registry()
        >>> image = registry.execute("Tinted Image", node_dict, [])
    """

    def __init__(self):
        self._executors: Dict[str, Tuple[ExecutorFunction, int]] = {}

    def register(self, node_type: str, executor: ExecutorFunction, input_count: int = 0) -> None:
        """
        Register a node executor.

        Args:
            node_type: Node type name (e.g., "Tinted Image")
            executor: Callable accepting (node_dict, inputs)
            input_count: Number of input images the node requires

        Raises:
            ValueError: If node_type is empty or executor is not callable
            RuntimeError: If node_type is already registered
        """
        node_type = str(node_type).strip()
        if not node_type:
            raise ValueError("node_type cannot be empty")
        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")
        if node_type in self._executors:
            raise RuntimeError(f"Node type '{node_type}' is already registered")

        self._executors[node_type] = (executor, int(input_count))
        logger.debug(f"Registered executor for node type: {node_type}")

    def execute(self, node_type: str, node_dict: Dict[str, Any], inputs: List[Any]) -> Any:
        """
        Run a node with its registered executor.

        Raises:
            KeyError: If node_type is not registered
            ValueError: If fewer inputs are given than the node requires
        """
        entry = self._executors.get(str(node_type).strip())
        if entry is None:
            available = ", ".join(sorted(self._executors))
            raise KeyError(
                f"No executor registered for node type '{node_type}'. "
                f"Available types: {available}"
            )

        executor, required = entry
        if len(inputs) < required:
            raise ValueError(
                f"Node type '{node_type}' requires {required} input(s), got {len(inputs)}"
            )
        return executor(node_dict, inputs)


_default_registry: Optional[NodeExecutorRegistry] = None


def get_default_registry() -> NodeExecutorRegistry:
    """Get the global registry, creating it with the built-in nodes on first use."""
    global _default_registry

    if _default_registry is None:
        _default_registry = NodeExecutorRegistry()
        register_default_executors(_default_registry)

    return _default_registry


def register_default_executors(registry: NodeExecutorRegistry) -> None:
    """Register the Tinted Image and Image Adjust node executors."""
    from TI_Libs.NodesLib.tinted_image_node import (
        execute_image_adjust_node,
        execute_tinted_image_node,
    )

    registry.register(NODE_TYPE_TINTED_IMAGE, execute_tinted_image_node, input_count=0)
    registry.register(NODE_TYPE_IMAGE_ADJUST, execute_image_adjust_node, input_count=1)
