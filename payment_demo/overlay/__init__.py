"""Overlay notifiers announcing successful payments."""

from .banner import BannerOverlayNotifier
from .interface import OverlayNotifier

__all__ = ["BannerOverlayNotifier", "OverlayNotifier"]
