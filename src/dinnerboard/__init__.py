"""
Dinnerboard family dinner planning package.

The package turns scheduled dinners and meal templates into a consolidated grocery list and
ranks meal suggestions by how well they reuse ingredients already on hand.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
