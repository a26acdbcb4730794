"""
Selection tools for MeasureLabel
Turns mouse input on the matplotlib canvas into the image's current selection
"""
import logging
from typing import Optional

from matplotlib.lines import Line2D
from matplotlib.widgets import RectangleSelector

from measurelabel.core.image_document import ImageDocument
from measurelabel.core.rois import LineRoi, PointRoi, RectangleRoi, ROIType


class SelectionTool:
    """Interactive line / rectangle / point selection on an image"""

    def __init__(self, figure, subplot, image: ImageDocument, status_callback=None):
        self.logger = logging.getLogger(__name__)
        self.figure = figure
        self.subplot = subplot
        self.image = image
        self.status_callback = status_callback

        self.current_roi_type = ROIType.LINE
        self.selection_active = False
        self.current_selector = None

        # Event handlers storage for proper cleanup
        self.event_handlers = {}

        # Line drag state
        self._line_start = None
        self._line_preview: Optional[Line2D] = None

        self.logger.info("Selection tool initialized")

    def set_roi_type(self, roi_type: ROIType):
        """Set the current selection type with proper reinitialization"""
        if roi_type == ROIType.TEXT:
            raise ValueError("Text ROIs cannot be drawn as selections")

        self.current_roi_type = roi_type

        if self.selection_active:
            self._cleanup_event_handlers()
            self._setup_event_handlers()

        self._update_status(f"Selection mode: {roi_type.value}")
        self.logger.info(f"Selection type set to {roi_type.value}")

    def activate_selection(self):
        if self.selection_active:
            return

        self._cleanup_event_handlers()
        self.selection_active = True
        self._setup_event_handlers()

        if self.current_roi_type == ROIType.LINE:
            self._update_status("Line selection active - click and drag to draw a line")
        else:
            self._update_status(f"Selection active - {self.current_roi_type.value} mode")
        self.logger.info("Selection activated")

    def deactivate_selection(self):
        if not self.selection_active:
            return

        self.selection_active = False
        self._cleanup_event_handlers()
        self._update_status("Selection deactivated")
        self.logger.info("Selection deactivated")

    def _setup_event_handlers(self):
        if self.current_roi_type == ROIType.LINE:
            self._setup_line_selector()
        elif self.current_roi_type == ROIType.RECTANGLE:
            self._setup_rectangle_selector()
        elif self.current_roi_type == ROIType.POINT:
            self._setup_point_selector()

    def _setup_line_selector(self):
        canvas = self.figure.canvas
        self.event_handlers['button_press'] = canvas.mpl_connect(
            'button_press_event', self._on_line_press
        )
        self.event_handlers['motion'] = canvas.mpl_connect(
            'motion_notify_event', self._on_line_motion
        )
        self.event_handlers['button_release'] = canvas.mpl_connect(
            'button_release_event', self._on_line_release
        )

    def _setup_rectangle_selector(self):
        self.current_selector = RectangleSelector(
            self.subplot,
            self._on_rectangle_select,
            useblit=True,
            button=[1],  # Only left mouse button
            minspanx=1,
            minspany=1,
            spancoords='data',
            interactive=False
        )

    def _setup_point_selector(self):
        self.event_handlers['button_press'] = self.figure.canvas.mpl_connect(
            'button_press_event', self._on_point_click
        )

    def _cleanup_event_handlers(self):
        if self.current_selector is not None:
            self.current_selector.set_active(False)
            self.current_selector = None

        for event_id in self.event_handlers.values():
            self.figure.canvas.mpl_disconnect(event_id)
        self.event_handlers.clear()

        self._remove_line_preview()
        self._line_start = None

    def _on_line_press(self, event):
        if event.inaxes != self.subplot or event.button != 1:
            return
        if event.xdata is None or event.ydata is None:
            return

        self._line_start = (float(event.xdata), float(event.ydata))
        self._remove_line_preview()
        self._line_preview = Line2D(
            [event.xdata, event.xdata], [event.ydata, event.ydata],
            color='yellow', linewidth=1.5, linestyle='--'
        )
        self.subplot.add_line(self._line_preview)
        self.figure.canvas.draw_idle()

    def _on_line_motion(self, event):
        if self._line_start is None or self._line_preview is None:
            return
        if event.inaxes != self.subplot or event.xdata is None or event.ydata is None:
            return

        x0, y0 = self._line_start
        self._line_preview.set_data([x0, event.xdata], [y0, event.ydata])
        self.figure.canvas.draw_idle()

    def _on_line_release(self, event):
        if self._line_start is None:
            return

        x0, y0 = self._line_start
        self._line_start = None
        self._remove_line_preview()

        if event.xdata is None or event.ydata is None:
            self.figure.canvas.draw_idle()
            return

        x1, y1 = float(event.xdata), float(event.ydata)
        if (x0, y0) == (x1, y1):
            self._update_status("Line too short - drag to draw a line")
            self.figure.canvas.draw_idle()
            return

        roi = LineRoi(x1=x0, y1=y0, x2=x1, y2=y1)
        self._set_selection(roi)
        length = roi.get_length(self.image.get_calibration())
        unit = self.image.get_calibration().get_unit()
        self._update_status(
            f"Line ({x0:.1f}, {y0:.1f}) to ({x1:.1f}, {y1:.1f}) - length {length:.2f} {unit}"
        )

    def _on_rectangle_select(self, eclick, erelease):
        if eclick is None or erelease is None:
            return
        if eclick.xdata is None or eclick.ydata is None or \
           erelease.xdata is None or erelease.ydata is None:
            return

        x = min(eclick.xdata, erelease.xdata)
        y = min(eclick.ydata, erelease.ydata)
        roi = RectangleRoi(
            x=float(x),
            y=float(y),
            width=float(abs(erelease.xdata - eclick.xdata)),
            height=float(abs(erelease.ydata - eclick.ydata))
        )
        self._set_selection(roi)
        self._update_status(f"Rectangle at ({roi.x:.1f}, {roi.y:.1f}) {roi.width:.1f}×{roi.height:.1f}px")

    def _on_point_click(self, event):
        if event.inaxes != self.subplot or event.button != 1:
            return
        if event.xdata is None or event.ydata is None:
            return

        x_pixel = int(round(event.xdata))
        y_pixel = int(round(event.ydata))
        self._set_selection(PointRoi(x=x_pixel, y=y_pixel))
        self._update_status(f"Selected pixel at ({x_pixel}, {y_pixel})")

    def _set_selection(self, roi):
        self.image.set_roi(roi)
        self.logger.info(f"New {roi.roi_type.value} selection: {roi.to_dict()['coordinates']}")
        self.image.update_and_repaint_window()

    def _remove_line_preview(self):
        if self._line_preview is not None:
            self._line_preview.remove()
            self._line_preview = None

    def _update_status(self, message: str):
        """Update status through callback"""
        if self.status_callback:
            self.status_callback(message)
        else:
            self.logger.info(f"Selection status: {message}")
