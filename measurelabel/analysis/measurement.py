"""
Line measurement and label placement for MeasureLabel
"""
import logging
import math
from typing import Tuple

from measurelabel.core.rois import LineRoi

logger = logging.getLogger(__name__)

TEXT_LOCATIONS = ('top', 'center', 'bottom')


def d2s(value: float, digits: int) -> str:
    """
    Format a number with a fixed count of decimal places

    Args:
        value: Number to format
        digits: Decimal places; a negative count gives scientific notation
            with abs(digits) decimals in the mantissa

    Returns:
        Formatted string ("NaN" / "Infinity" / "-Infinity" for non-finite values)
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    digits = int(digits)
    if digits < 0:
        mantissa, exponent = f"{value:.{-digits}E}".split('E')
        return f"{mantissa}E{int(exponent)}"
    return f"{value:.{digits}f}"


def format_length(length: float, digits: int, unit: str) -> str:
    """Label text for a length, e.g. '5.00 µm'"""
    return f"{d2s(length, digits)} {unit}"


def measure_text(roi: LineRoi, digits: int, unit: str, calibration=None) -> str:
    length = roi.get_length(calibration)
    logger.info(f"Length of line is: {length}")
    return format_length(length, digits, unit)


def text_location_coords(roi: LineRoi, location: str) -> Tuple[float, float]:
    """
    Anchor position of the length label for a line

    Args:
        roi: The measured line
        location: 'top' (first endpoint), 'center' (midpoint) or
            'bottom' (second endpoint)

    Returns:
        (x, y) in pixel coordinates; (0, 0) for an unrecognised location
    """
    pos_x, pos_y = 0.0, 0.0

    if location == 'center':
        pos_x = (roi.x2 - roi.x1) / 2 + roi.x1
        pos_y = (roi.y2 - roi.y1) / 2 + roi.y1
    elif location == 'top':
        pos_x, pos_y = roi.x1, roi.y1
    elif location == 'bottom':
        pos_x, pos_y = roi.x2, roi.y2
    else:
        # TODO: decide whether an unknown location should fall back to 'center'
        logger.warning(f"Unrecognised text location {location!r}, placing label at (0, 0)")

    return pos_x, pos_y
