"""
Draws an image's overlay and current selection on a matplotlib Axes
"""
import logging
from typing import List

import matplotlib.patches as patches
from matplotlib.artist import Artist
from matplotlib.lines import Line2D

from measurelabel.core.image_document import ImageDocument
from measurelabel.core.rois import LineRoi, PointRoi, RectangleRoi, Roi, TextRoi

SELECTION_COLOR = 'yellow'


class OverlayRenderer:
    """Keeps matplotlib artists in sync with an ImageDocument's overlay"""

    def __init__(self, figure, subplot):
        self.logger = logging.getLogger(__name__)
        self.figure = figure
        self.subplot = subplot
        self.artists: List[Artist] = []

    def render(self, image: ImageDocument) -> None:
        """Replace all overlay artists; usable as an image repaint listener"""
        self.clear()

        overlay = image.get_overlay()
        if overlay is not None:
            for roi in overlay:
                self._draw_roi(roi)

        selection = image.get_roi()
        if selection is not None and (overlay is None or not overlay.contains(selection)):
            self._draw_roi(selection, selection=True)

        self.figure.canvas.draw_idle()
        self.logger.debug(f"Rendered {len(self.artists)} overlay artists")

    def clear(self) -> None:
        for artist in self.artists:
            artist.remove()
        self.artists = []

    def pixels_to_points(self, size_px: float) -> float:
        """Convert a size in image pixels to points at the current zoom"""
        transform = self.subplot.transData
        (x0, _), (x1, _) = transform.transform([(0, 0), (1, 0)])
        display_per_pixel = abs(x1 - x0)
        return size_px * display_per_pixel * 72.0 / self.figure.dpi

    def _draw_roi(self, roi: Roi, selection: bool = False) -> None:
        if selection:
            # Live selections keep a thin, zoom-independent outline
            color = SELECTION_COLOR
            linewidth = 1.5
        else:
            color = roi.stroke_color
            linewidth = self.pixels_to_points(roi.stroke_width)

        if isinstance(roi, LineRoi):
            line = Line2D(
                [roi.x1, roi.x2], [roi.y1, roi.y2],
                color=color,
                linewidth=linewidth,
                solid_capstyle='butt'
            )
            self.subplot.add_line(line)
            self.artists.append(line)

        elif isinstance(roi, TextRoi):
            text = self.subplot.text(
                roi.x, roi.y, roi.text,
                color=color,
                fontsize=self.pixels_to_points(roi.font.size),
                family=roi.font.family.lower(),
                weight='bold' if roi.font.bold else 'normal',
                ha='left', va='top',
                clip_on=True
            )
            self.artists.append(text)

        elif isinstance(roi, RectangleRoi):
            rect = patches.Rectangle(
                (roi.x, roi.y), roi.width, roi.height,
                fill=False,
                edgecolor=color,
                linewidth=linewidth
            )
            self.subplot.add_patch(rect)
            self.artists.append(rect)

        elif isinstance(roi, PointRoi):
            marker = self.subplot.plot(
                roi.x, roi.y,
                marker='+',
                color=color,
                markersize=12,
                markeredgewidth=2
            )[0]
            self.artists.append(marker)

        else:
            self.logger.warning(f"Cannot draw ROI of type {type(roi).__name__}")
