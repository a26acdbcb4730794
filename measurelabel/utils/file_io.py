"""
File input/output utilities for MeasureLabel
"""
import json
import numpy as np
from PIL import Image
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from measurelabel.core.image_document import Calibration, ImageDocument

# TIFF tag numbers
IMAGE_DESCRIPTION = 270
X_RESOLUTION = 282
Y_RESOLUTION = 283
RESOLUTION_UNIT = 296

_RESOLUTION_UNITS = {2: 'inch', 3: 'cm'}


class ImageLoader:
    """Load images from various file formats"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def load_image(self, file_path: Path) -> Optional[ImageDocument]:
        """
        Load image with its spatial calibration

        Args:
            file_path: Path to image file

        Returns:
            ImageDocument or None if failed
        """
        try:
            with Image.open(file_path) as image:
                calibration = self.read_calibration(image)
                if image.mode == 'P':
                    image = image.convert('RGBA')
                array = np.array(image)
            self.logger.info(f"Loaded image with shape {array.shape} from {file_path.name}")
            if calibration.scaled():
                self.logger.info(
                    f"Calibration: {calibration.pixel_width:.6g} {calibration.get_unit()}/pixel"
                )
            return ImageDocument(array, title=file_path.name, calibration=calibration)
        except Exception as e:
            self.logger.error(f"Failed to load image: {e}")
            return None

    def read_calibration(self, image: Image.Image) -> Calibration:
        """
        Read pixel size and unit from TIFF tags

        ImageJ TIFFs store the unit in the ImageDescription ("unit=micron")
        and pixels-per-unit in the X/Y resolution tags. Other formats are
        uncalibrated.
        """
        tags = getattr(image, 'tag_v2', None)
        if not tags:
            return Calibration()

        x_res = tags.get(X_RESOLUTION)
        y_res = tags.get(Y_RESOLUTION)
        if x_res is None or float(x_res) <= 0:
            return Calibration()
        if y_res is None or float(y_res) <= 0:
            y_res = x_res

        unit = self._description_unit(tags.get(IMAGE_DESCRIPTION))
        if unit is None:
            unit = _RESOLUTION_UNITS.get(tags.get(RESOLUTION_UNIT))
        if unit is None:
            return Calibration()

        return Calibration(
            pixel_width=1.0 / float(x_res),
            pixel_height=1.0 / float(y_res),
            unit=unit,
        )

    @staticmethod
    def _description_unit(description: Any) -> Optional[str]:
        if not isinstance(description, str) or not description.startswith('ImageJ'):
            return None
        for line in description.splitlines():
            key, _, value = line.partition('=')
            if key.strip() == 'unit' and value.strip():
                return value.strip().replace('\\u00B5', 'µ')
        return None

    def load_image_info(self, file_path: Path) -> Optional[dict]:
        """
        Get image information without loading full data

        Args:
            file_path: Path to image file

        Returns:
            Image info dictionary or None if failed
        """
        try:
            with Image.open(file_path) as image:
                calibration = self.read_calibration(image)
                info = {
                    'size': image.size,
                    'mode': image.mode,
                    'format': image.format,
                    'filename': file_path.name,
                    'unit': calibration.get_unit(),
                    'pixel_width': calibration.pixel_width,
                }
                return info
        except Exception as e:
            self.logger.error(f"Failed to get image info: {e}")
            return None


def export_rois_json(rois: List[Dict[str, Any]], file_path: Path) -> Path:
    """Write exported ROI dictionaries to a JSON file"""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump({'rois': rois}, f, indent=2, ensure_ascii=False)
    logging.getLogger(__name__).info(f"Exported {len(rois)} ROIs to {file_path}")
    return file_path
