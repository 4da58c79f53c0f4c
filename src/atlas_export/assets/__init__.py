"""
Image asset loading for image and logo elements.
"""

from .loader import DefaultImageLoader, ImageLoader

__all__ = ["DefaultImageLoader", "ImageLoader"]
