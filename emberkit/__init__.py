"""Game-engine building blocks: rectangle packing, text editing with undo, OBJ file checks, matrices and particles."""

__version__ = "0.1.0"