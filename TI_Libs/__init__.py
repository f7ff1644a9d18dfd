"""
TI_Libs - Tinted Image Library Modules

This package contains the config-driven image transformation pipeline,
organized into specialized sub-packages:

- ImageEditingLib: Color matrices, image models, loading and the
  crop/tint/transform pipeline
- ConfigLib: Configuration sources and parameter binding
- NodesLib: Node executors exposing tinted images to a node pipeline
"""

__version__ = "0.1.0"
