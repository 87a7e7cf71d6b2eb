"""Presentation surfaces that show payment screens."""

from .headless import HeadlessSurface
from .interface import PresentationSurface

__all__ = ["HeadlessSurface", "PresentationSurface"]
