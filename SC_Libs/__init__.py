"""
SC_Libs - Scene Canvas Library Modules

This package contains core functionality for the Scene Canvas project,
organized into specialized sub-packages:

- GeometryLib: Letterbox projection, drag and pinch gesture math
- ImageEditingLib: Pixel buffers, edit pipeline filters and mask encoding
- SessionLib: History stack, placement model and the edit session controller
"""

__version__ = "0.1.0"
