"""
Image utilities for render targets

Pattern: QImage-backed render targets
Targets double as camera outputs and UI-displayable textures.
"""

from typing import Tuple

from PyQt6.QtGui import QColor, QImage

from ..config import Config

RGB = Tuple[float, float, float]


def rgb_to_qcolor(color: RGB) -> QColor:
    """
    Convert a linear 0..1 RGB triple to an opaque QColor

    Args:
        color: (r, g, b) floats, clamped to 0..1

    Returns:
        QColor
    """
    r, g, b = (min(max(float(c), 0.0), 1.0) for c in color)
    return QColor.fromRgbF(r, g, b, 1.0)


def hex_to_rgb(value: str) -> RGB:
    """Parse '#rrggbb' into a 0..1 RGB triple"""
    value = value.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Expected #rrggbb color, got {value!r}")
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


class QImageAllocator:
    """
    Render target allocator producing QImage handles

    Every target is RGBA8888 and starts filled with the thumbnail clear
    color, so an unfinished thumbnail displays as a solid color.

    Usage:
        allocator = QImageAllocator()
        image = allocator.allocate(256, 256)
    """

    def __init__(self, clear_color: RGB = Config.THUMBNAIL_CLEAR_COLOR):
        self.clear_color = clear_color
        self.allocated = 0

    def allocate(self, width: int, height: int) -> QImage:
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid render target size {width}x{height}")

        image = QImage(width, height, QImage.Format.Format_RGBA8888)
        image.fill(rgb_to_qcolor(self.clear_color))
        self.allocated += 1
        return image

    def fill(self, image: QImage, color: RGB) -> None:
        image.fill(rgb_to_qcolor(color))


__all__ = ['rgb_to_qcolor', 'hex_to_rgb', 'QImageAllocator']
