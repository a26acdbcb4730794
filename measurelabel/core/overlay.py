"""
Overlay and ROI Manager collections for MeasureLabel
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

from measurelabel.core.rois import Roi


class Overlay:
    """Non-destructive annotation layer drawn on top of an image"""

    def __init__(self):
        self._rois: List[Roi] = []

    def add(self, roi: Roi) -> None:
        self._rois.append(roi)

    def remove(self, roi: Roi) -> None:
        """Remove by identity; removing an absent ROI is a no-op"""
        index = self.index_of(roi)
        if index >= 0:
            del self._rois[index]

    def index_of(self, roi: Roi) -> int:
        for i, candidate in enumerate(self._rois):
            if candidate is roi:
                return i
        return -1

    def contains(self, roi: Roi) -> bool:
        return self.index_of(roi) >= 0

    def size(self) -> int:
        return len(self._rois)

    def clear(self) -> None:
        self._rois.clear()

    def to_list(self) -> List[Roi]:
        return list(self._rois)

    def __len__(self) -> int:
        return len(self._rois)

    def __iter__(self) -> Iterator[Roi]:
        return iter(list(self._rois))

    def __contains__(self, roi: Roi) -> bool:
        return self.contains(roi)


class RoiManager:
    """
    Process-wide ROI Manager

    Keeps named selections independently of any overlay. The first instance
    constructed becomes the shared one returned by get_instance().
    """

    _instance: Optional['RoiManager'] = None

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._rois: List[Roi] = []
        self._labels: List[str] = []
        RoiManager._instance = self
        self.logger.info("ROI Manager created")

    @classmethod
    def get_instance(cls) -> Optional['RoiManager']:
        return cls._instance

    @classmethod
    def get_or_create(cls) -> 'RoiManager':
        manager = cls.get_instance()
        if manager is None:
            manager = cls()
        return manager

    @classmethod
    def close(cls) -> None:
        """Drop the shared instance"""
        cls._instance = None

    def add_roi(self, roi: Roi) -> str:
        """
        Add a ROI under a unique label

        Args:
            roi: ROI to store

        Returns:
            The label it was stored under
        """
        label = self._unique_label(roi.name or self.get_label(roi))
        roi.name = label
        self._rois.append(roi)
        self._labels.append(label)
        self.logger.info(f"Added ROI to manager: {label}")
        return label

    @staticmethod
    def get_label(roi: Roi) -> str:
        """Position label "yyyy-xxxx" from the centre of the ROI bounds"""
        x, y, width, height = roi.get_bounds()
        xc = int(x + width / 2)
        yc = int(y + height / 2)
        return f"{max(yc, 0):04d}-{max(xc, 0):04d}"

    def _unique_label(self, label: str) -> str:
        if label not in self._labels:
            return label
        n = 1
        while f"{label}-{n}" in self._labels:
            n += 1
        return f"{label}-{n}"

    def remove(self, roi: Roi) -> None:
        for i, candidate in enumerate(self._rois):
            if candidate is roi:
                del self._rois[i]
                del self._labels[i]
                return

    def reset(self) -> None:
        self._rois.clear()
        self._labels.clear()
        self.logger.info("ROI Manager reset")

    def count(self) -> int:
        return len(self._rois)

    def contains(self, roi: Roi) -> bool:
        return any(candidate is roi for candidate in self._rois)

    def get_rois_as_array(self) -> List[Roi]:
        return list(self._rois)

    def labels(self) -> List[str]:
        return list(self._labels)

    def export_rois(self) -> List[Dict[str, Any]]:
        """Export ROI data for saving/analysis"""
        return [roi.to_dict() for roi in self._rois]

    def __len__(self) -> int:
        return len(self._rois)
