"""Viewport scrolling for the word strip."""
from .controller import ScrollController, ScrollState
from .layout import MonospaceLayout

__all__ = ["ScrollController", "ScrollState", "MonospaceLayout"]
