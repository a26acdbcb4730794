"""
ROI (Region of Interest) types for MeasureLabel
Lines, text labels, rectangles and points in image pixel coordinates
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from matplotlib.colors import is_color_like


class ROIType(Enum):
    """Types of ROI objects that can live on an overlay"""
    LINE = "line"
    TEXT = "text"
    RECTANGLE = "rectangle"
    POINT = "point"


def validate_color(color: str) -> str:
    """Return the color name unchanged, or raise ValueError if it is not a known color"""
    if not isinstance(color, str) or not is_color_like(color):
        raise ValueError(f"Unknown color: {color!r}")
    return color


@dataclass
class FontSpec:
    """Font used for text labels; size is in image pixels"""
    family: str = "Serif"
    bold: bool = True
    size: float = 72.0


@dataclass(eq=False)
class Roi:
    """Base ROI; identity-compared so overlays can hold equal-looking objects"""
    stroke_color: str = "yellow"
    stroke_width: float = 1.0
    name: Optional[str] = None

    roi_type = None

    def is_line(self) -> bool:
        return False

    def set_stroke_color(self, color: str) -> None:
        self.stroke_color = validate_color(color)

    def set_stroke_width(self, width: float) -> None:
        self.stroke_width = float(width)

    def get_bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box as (x, y, width, height)"""
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.roi_type.value,
            'name': self.name,
            'color': self.stroke_color,
            'linewidth': self.stroke_width,
        }


@dataclass(eq=False)
class LineRoi(Roi):
    """Straight line selection from (x1, y1) to (x2, y2)"""
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    roi_type = ROIType.LINE

    def is_line(self) -> bool:
        return True

    def get_length(self, calibration=None) -> float:
        """
        Euclidean length of the line

        Args:
            calibration: Optional Calibration; each axis is scaled by its
                pixel width/height. Pixel units when omitted.

        Returns:
            Length in calibrated units
        """
        pixel_width = calibration.pixel_width if calibration is not None else 1.0
        pixel_height = calibration.pixel_height if calibration is not None else 1.0
        dx = (self.x2 - self.x1) * pixel_width
        dy = (self.y2 - self.y1) * pixel_height
        return math.sqrt(dx * dx + dy * dy)

    def get_bounds(self) -> Tuple[float, float, float, float]:
        x = min(self.x1, self.x2)
        y = min(self.y1, self.y2)
        return x, y, abs(self.x2 - self.x1), abs(self.y2 - self.y1)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['coordinates'] = {'x1': self.x1, 'y1': self.y1, 'x2': self.x2, 'y2': self.y2}
        return data


@dataclass(eq=False)
class TextRoi(Roi):
    """Text label anchored at its upper-left corner"""
    x: float = 0.0
    y: float = 0.0
    text: str = ""
    font: FontSpec = field(default_factory=FontSpec)

    roi_type = ROIType.TEXT

    def set_location(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def set_current_font(self, font: FontSpec) -> None:
        self.font = font

    def get_bounds(self) -> Tuple[float, float, float, float]:
        # Rough text box: average glyph is ~0.6 em wide
        width = len(self.text) * self.font.size * 0.6
        return self.x, self.y, width, self.font.size

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['coordinates'] = {'x': self.x, 'y': self.y}
        data['text'] = self.text
        data['font'] = {'family': self.font.family, 'bold': self.font.bold, 'size': self.font.size}
        return data


@dataclass(eq=False)
class RectangleRoi(Roi):
    """Axis-aligned rectangle selection"""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    roi_type = ROIType.RECTANGLE

    def get_bounds(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['coordinates'] = {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}
        return data


@dataclass(eq=False)
class PointRoi(Roi):
    """Single point selection"""
    x: float = 0.0
    y: float = 0.0

    roi_type = ROIType.POINT

    def get_bounds(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, 0.0, 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['coordinates'] = {'x': self.x, 'y': self.y}
        return data
