"""
Image document model for MeasureLabel
An image with its spatial calibration, overlay and current selection
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from measurelabel.core.overlay import Overlay
from measurelabel.core.rois import Roi

logger = logging.getLogger(__name__)

_MICRON_ALIASES = ('um', 'micron', 'microns', 'micrometer', 'micrometers', 'µm', 'μm')


@dataclass
class Calibration:
    """Pixel-to-unit mapping; one pixel is pixel_width x pixel_height units"""
    pixel_width: float = 1.0
    pixel_height: float = 1.0
    unit: Optional[str] = None

    def get_unit(self) -> str:
        if not self.unit or self.unit.lower() in ('pixel', 'pixels'):
            return "pixel"
        if self.unit.lower() in _MICRON_ALIASES:
            return "µm"
        return self.unit

    def scaled(self) -> bool:
        return self.get_unit() != "pixel"

    def get_x(self, x: float) -> float:
        return x * self.pixel_width

    def get_y(self, y: float) -> float:
        return y * self.pixel_height

    @classmethod
    def from_known_distance(cls, distance_px: float, known_distance: float, unit: str) -> 'Calibration':
        """Square-pixel calibration from a known distance (Set Scale)"""
        if distance_px <= 0 or known_distance <= 0:
            raise ValueError("Distances must be positive")
        scale = known_distance / distance_px
        return cls(pixel_width=scale, pixel_height=scale, unit=unit)


@dataclass(frozen=True)
class ImageContext:
    """Read-only summary of an image's size in pixels and calibrated units"""
    width_px: int
    height_px: int
    unit: str
    width_unit: float
    height_unit: float


class ImageDocument:
    """An open image: pixel data, calibration, overlay and current selection"""

    def __init__(self, data: np.ndarray, title: str = "Image",
                 calibration: Optional[Calibration] = None):
        self.data = data
        self.title = title
        self._calibration = calibration or Calibration()
        self._overlay: Optional[Overlay] = None
        self._roi: Optional[Roi] = None
        self._repaint_listeners: List[Callable[['ImageDocument'], None]] = []

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    def get_calibration(self) -> Calibration:
        return self._calibration

    def set_calibration(self, calibration: Calibration) -> None:
        self._calibration = calibration

    def get_overlay(self) -> Optional[Overlay]:
        return self._overlay

    def set_overlay(self, overlay: Optional[Overlay]) -> None:
        self._overlay = overlay

    def get_roi(self) -> Optional[Roi]:
        return self._roi

    def set_roi(self, roi: Optional[Roi]) -> None:
        self._roi = roi

    def kill_roi(self) -> None:
        self._roi = None

    def add_repaint_listener(self, listener: Callable[['ImageDocument'], None]) -> None:
        self._repaint_listeners.append(listener)

    def remove_repaint_listener(self, listener: Callable[['ImageDocument'], None]) -> None:
        if listener in self._repaint_listeners:
            self._repaint_listeners.remove(listener)

    def update_and_repaint_window(self) -> None:
        """Ask every attached view to redraw the image and its overlay"""
        for listener in list(self._repaint_listeners):
            listener(self)


_current_image: Optional[ImageDocument] = None


def set_current_image(image: Optional[ImageDocument]) -> None:
    global _current_image
    _current_image = image


def get_current_image() -> Optional[ImageDocument]:
    return _current_image


def acquire_image_context(image: ImageDocument) -> Tuple[Overlay, ImageContext]:
    """
    Get the image's overlay (creating and attaching one if absent) and its size info

    Args:
        image: The image to annotate

    Returns:
        Tuple of (overlay, image context)
    """
    overlay = image.get_overlay()
    if overlay is None:
        overlay = Overlay()
        image.set_overlay(overlay)
        logger.debug(f"Created new overlay for {image.title}")

    calibration = image.get_calibration()
    context = ImageContext(
        width_px=image.width,
        height_px=image.height,
        unit=calibration.get_unit(),
        width_unit=calibration.get_x(image.width),
        height_unit=calibration.get_y(image.height),
    )

    logger.info(f"Image in [px] is {context.width_px}x{context.height_px}")
    logger.info(f"Image in [{context.unit}] is {context.width_unit}x{context.height_unit}")
    return overlay, context
