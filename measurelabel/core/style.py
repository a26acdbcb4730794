"""
Line and label style settings for MeasureLabel
"""
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from measurelabel.core.rois import validate_color

# Image height (px) per unit of line width / font size when smart sizing is on
SCALE_LINE_WIDTH = 200
SCALE_FONT = 35


@dataclass(frozen=True)
class StyleSettings:
    """User-adjustable style of a measured line and its length label"""
    line_width: float = 3
    line_color: str = 'white'
    text_color: str = 'white'
    font_size: float = 72
    text_location: str = 'center'
    length_digits: int = 1
    save_to_overlay: bool = True

    def validated(self) -> 'StyleSettings':
        """Return self after checking colors and sizes; raises ValueError on bad input"""
        validate_color(self.line_color)
        validate_color(self.text_color)
        if not self.line_width > 0:
            raise ValueError(f"Line width must be positive, got {self.line_width}")
        if not self.font_size > 0:
            raise ValueError(f"Font size must be positive, got {self.font_size}")
        return self


def resolve_default_style(
    height_px: int,
    smart_sizing: bool = True,
    base: Optional[StyleSettings] = None,
    scale_line_width: float = SCALE_LINE_WIDTH,
    scale_font: float = SCALE_FONT
) -> StyleSettings:
    """
    Default style for an image

    With smart sizing the line width and font size follow the image height,
    otherwise the base values are kept.

    Args:
        height_px: Image height in pixels
        smart_sizing: Scale width/font with image height
        base: Settings providing every other field (and the fixed sizes)
        scale_line_width: Pixels of image height per unit of line width
        scale_font: Pixels of image height per unit of font size

    Returns:
        New StyleSettings
    """
    base = base or StyleSettings()
    if not smart_sizing:
        return base
    return replace(
        base,
        line_width=math.ceil(height_px / scale_line_width),
        font_size=math.ceil(height_px / scale_font),
    )


def default_style_from_config(config: Dict[str, Any]) -> StyleSettings:
    """Base style from the application configuration"""
    return StyleSettings(
        line_width=config.get('line_width', 3),
        line_color=config.get('line_color', 'white'),
        text_color=config.get('text_color', 'white'),
        font_size=config.get('font_size', 72),
        text_location=config.get('text_location', 'center'),
        length_digits=int(config.get('length_digits', 1)),
        save_to_overlay=config.get('save_to_overlay', True),
    )
