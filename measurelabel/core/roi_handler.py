"""
Measure-and-label handler for a line selection

Adds the line and a text label showing its length to the image overlay,
restyles both while the style dialog is open, and finally commits them to
the overlay or the ROI Manager, or discards them.
"""
import logging
from enum import Enum
from copy import copy
from typing import Optional

from measurelabel.analysis.measurement import measure_text, text_location_coords
from measurelabel.core.image_document import ImageDocument
from measurelabel.core.overlay import Overlay, RoiManager
from measurelabel.core.rois import FontSpec, LineRoi, Roi, TextRoi
from measurelabel.core.style import StyleSettings


class HandlerState(Enum):
    IDLE = "idle"
    VALIDATED = "validated"
    ANNOTATED = "annotated"
    EDITING = "editing"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class RoiHandler:
    """Annotates one line selection with its measured length"""

    def __init__(self, image: ImageDocument, overlay: Overlay, settings: StyleSettings,
                 unit: Optional[str] = None, font_family: str = "Serif"):
        self.logger = logging.getLogger(__name__)
        self.image = image
        self.overlay = overlay
        self.settings = settings
        # Length and unit come from the calibration at the time of measuring
        self.calibration = copy(image.get_calibration())
        self.unit = unit or self.calibration.get_unit()
        self.font_family = font_family

        self.state = HandlerState.IDLE
        self.line_roi: Optional[LineRoi] = None
        self.text_roi: Optional[TextRoi] = None

    def handle(self, roi: Optional[Roi]) -> bool:
        """
        Start annotating a selection

        Args:
            roi: Current selection of the image

        Returns:
            False (and nothing changed) when the selection is missing or not
            a line, True once the line and its label are on the overlay

        Raises:
            ValueError: If the settings hold an unknown color or a
                non-positive size; the overlay is left untouched
        """
        if roi is None or not roi.is_line():
            self.logger.info("Only line selection currently supported")
            return False

        self.settings.validated()
        self.line_roi = roi
        self.state = HandlerState.VALIDATED

        self.logger.debug(f"Drawn roi is part of overlay? {self.overlay.contains(roi)}")
        self.overlay.add(roi)
        self.logger.debug(f"Drawn roi is part of overlay? {self.overlay.contains(roi)}")

        self._apply_line_style()
        self.logger.info(
            f"Coords for line roi are: x1 {roi.x1} y1 {roi.y1} x2 {roi.x2} y2 {roi.y2}"
        )

        self.text_roi = self._create_text_roi()
        self.overlay.add(self.text_roi)

        self.image.update_and_repaint_window()
        self.state = HandlerState.ANNOTATED
        return True

    def update_roi(self, settings: Optional[StyleSettings] = None) -> None:
        """Apply new settings: restyle the line and replace its label"""
        if self.state not in (HandlerState.ANNOTATED, HandlerState.EDITING):
            raise RuntimeError(f"Cannot update ROI in state {self.state.value}")

        if settings is not None:
            self.settings = settings.validated()
        self.state = HandlerState.EDITING

        self._apply_line_style()

        text_roi = self._create_text_roi()
        self.overlay.remove(self.text_roi)
        self.text_roi = text_roi
        self.overlay.add(self.text_roi)

        self.image.update_and_repaint_window()

    def startup_listener(self, dialog, event) -> bool:
        self.logger.info("Dialog box was launched")
        return True

    def change_listener(self, dialog, event) -> bool:
        self.logger.debug("Inside: dialogItemChanged")
        self.update_roi(dialog.get_settings())
        return True

    def commit(self, roi_manager: Optional[RoiManager] = None) -> None:
        """Keep the annotation: on the overlay, or moved to the ROI Manager"""
        self.logger.info("User clicked OK on the dialog box")

        if not self.settings.save_to_overlay:
            self.overlay.remove(self.line_roi)
            self.overlay.remove(self.text_roi)

            if roi_manager is None:
                roi_manager = RoiManager.get_or_create()
            roi_manager.add_roi(self.line_roi)
            roi_manager.add_roi(self.text_roi)
            self.image.update_and_repaint_window()

        self.state = HandlerState.COMMITTED

    def discard(self) -> None:
        """Drop the line and its label from the overlay"""
        self.logger.info("User closed or clicked CANCEL on the dialog box")
        self.overlay.remove(self.line_roi)
        self.overlay.remove(self.text_roi)
        self.image.update_and_repaint_window()
        self.state = HandlerState.DISCARDED

    def finish(self, was_oked: bool, roi_manager: Optional[RoiManager] = None) -> None:
        if was_oked:
            self.commit(roi_manager)
        else:
            self.discard()

    def _apply_line_style(self) -> None:
        self.line_roi.set_stroke_width(self.settings.line_width)
        self.line_roi.set_stroke_color(self.settings.line_color)

    def _create_text_roi(self) -> TextRoi:
        text = measure_text(
            self.line_roi,
            self.settings.length_digits,
            self.unit,
            self.calibration,
        )
        x, y = text_location_coords(self.line_roi, self.settings.text_location)
        font = FontSpec(family=self.font_family, bold=True, size=self.settings.font_size)
        text_roi = TextRoi(x=x, y=y, text=text, font=font)
        text_roi.set_stroke_color(self.settings.text_color)
        return text_roi
