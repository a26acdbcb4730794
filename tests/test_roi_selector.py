from types import SimpleNamespace

import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from measurelabel.core.rois import LineRoi, PointRoi, ROIType
from measurelabel.gui.roi_selector import SelectionTool


@pytest.fixture
def tool(image):
    figure = Figure(figsize=(6, 4), dpi=100)
    FigureCanvasAgg(figure)
    subplot = figure.add_subplot(111)
    subplot.imshow(image.data, cmap='gray')
    messages = []
    tool = SelectionTool(figure, subplot, image, status_callback=messages.append)
    tool.messages = messages
    return tool


def mouse(tool, x, y, button=1):
    return SimpleNamespace(inaxes=tool.subplot, button=button, xdata=x, ydata=y)


def test_line_drag_sets_selection(tool, image, repaints):
    tool.activate_selection()
    tool._on_line_press(mouse(tool, 10, 20))
    tool._on_line_motion(mouse(tool, 20, 30))
    assert tool._line_preview is not None

    tool._on_line_release(mouse(tool, 13, 24))

    roi = image.get_roi()
    assert isinstance(roi, LineRoi)
    assert (roi.x1, roi.y1, roi.x2, roi.y2) == (10, 20, 13, 24)
    assert tool._line_preview is None
    assert len(repaints) == 1
    assert "length 5.00 µm" in tool.messages[-1]


def test_click_without_drag_is_not_a_line(tool, image):
    tool.activate_selection()
    tool._on_line_press(mouse(tool, 10, 20))
    tool._on_line_release(mouse(tool, 10, 20))
    assert image.get_roi() is None
    assert "too short" in tool.messages[-1]


def test_right_button_does_not_draw(tool, image):
    tool.activate_selection()
    tool._on_line_press(mouse(tool, 10, 20, button=3))
    tool._on_line_release(mouse(tool, 30, 40, button=3))
    assert image.get_roi() is None


def test_point_selection(tool, image):
    tool.set_roi_type(ROIType.POINT)
    tool.activate_selection()
    tool._on_point_click(mouse(tool, 4.6, 7.2))
    roi = image.get_roi()
    assert isinstance(roi, PointRoi)
    assert (roi.x, roi.y) == (5, 7)
    assert not roi.is_line()


def test_rectangle_selection(tool, image):
    tool.set_roi_type(ROIType.RECTANGLE)
    tool.activate_selection()
    assert tool.current_selector is not None

    tool._on_rectangle_select(mouse(tool, 30, 40), mouse(tool, 10, 15))
    roi = image.get_roi()
    assert roi.get_bounds() == (10, 15, 20, 25)


def test_switching_type_rebinds_handlers(tool):
    tool.activate_selection()
    assert set(tool.event_handlers) == {'button_press', 'motion', 'button_release'}

    tool.set_roi_type(ROIType.POINT)
    assert set(tool.event_handlers) == {'button_press'}

    tool.deactivate_selection()
    assert tool.event_handlers == {}
    assert not tool.selection_active


def test_text_is_not_a_selection_type(tool):
    with pytest.raises(ValueError):
        tool.set_roi_type(ROIType.TEXT)
