import numpy as np
import pytest

from measurelabel.core.dialog_model import (
    FONT_SIZE, LENGTH_DIGITS, LINE_COLOR, SAVE_TO_OVERLAY, TEXT_LOCATION
)
from measurelabel.core.image_document import ImageDocument, set_current_image
from measurelabel.core.measure_and_label import measure_and_label
from measurelabel.core.overlay import Overlay, RoiManager
from measurelabel.core.roi_handler import HandlerState
from measurelabel.core.rois import LineRoi, PointRoi, RectangleRoi, TextRoi


def test_no_open_image(scripted_dialog):
    factory = scripted_dialog()
    assert measure_and_label(dialog_factory=factory) is None
    assert factory.built == []


def test_uses_current_image(image, line, scripted_dialog):
    image.set_roi(line)
    set_current_image(image)

    handler = measure_and_label(dialog_factory=scripted_dialog())
    assert handler.image is image
    assert handler.state == HandlerState.COMMITTED


def test_non_line_selection_shows_no_dialog(image, scripted_dialog):
    image.set_roi(RectangleRoi(x=1, y=1, width=10, height=10))
    factory = scripted_dialog()

    handler = measure_and_label(image, dialog_factory=factory)
    assert handler.state == HandlerState.IDLE
    assert factory.built == []
    assert image.get_overlay().size() == 0


def test_missing_selection_shows_no_dialog(image, scripted_dialog):
    factory = scripted_dialog()
    handler = measure_and_label(image, dialog_factory=factory)
    assert handler.state == HandlerState.IDLE
    assert factory.built == []


def test_smart_default_style_prefills_dialog(image, line, scripted_dialog):
    image.set_roi(line)
    factory = scripted_dialog()
    handler = measure_and_label(image, config={'smart_sizing': True}, dialog_factory=factory)

    dialog = factory.built[0]
    assert dialog.shown
    assert dialog.values[FONT_SIZE] == "12"
    assert line.stroke_width == 2
    assert handler.text_roi.font.size == 12
    assert handler.text_roi.text == "5.0 µm"


def test_fixed_default_style(image, line, scripted_dialog):
    image.set_roi(line)
    handler = measure_and_label(image, config={'smart_sizing': False}, dialog_factory=scripted_dialog())
    assert line.stroke_width == 3
    assert handler.text_roi.font.size == 72


def test_ok_keeps_annotation_on_overlay(image, line, scripted_dialog):
    image.set_roi(line)
    handler = measure_and_label(image, dialog_factory=scripted_dialog(press="ok"))

    overlay = image.get_overlay()
    assert isinstance(overlay, Overlay)
    assert overlay.to_list() == [line, handler.text_roi]
    assert RoiManager.get_instance() is None


def test_ok_without_overlay_moves_annotation_to_manager(image, line, scripted_dialog):
    image.set_roi(line)
    factory = scripted_dialog(changes=[(SAVE_TO_OVERLAY, False)], press="ok")
    handler = measure_and_label(image, dialog_factory=factory)

    manager = RoiManager.get_instance()
    assert handler.state == HandlerState.COMMITTED
    assert manager.get_rois_as_array() == [line, handler.text_roi]
    assert image.get_overlay().size() == 0


def test_cancel_discards_everything(image, line, scripted_dialog):
    image.set_roi(line)
    factory = scripted_dialog(changes=[(SAVE_TO_OVERLAY, False), (LINE_COLOR, 'red')], press="cancel")
    handler = measure_and_label(image, dialog_factory=factory)

    assert handler.state == HandlerState.DISCARDED
    assert image.get_overlay().size() == 0
    assert RoiManager.get_instance() is None


def test_cancel_leaves_existing_manager_alone(image, line, scripted_dialog):
    manager = RoiManager()
    kept = PointRoi(x=3, y=3)
    manager.add_roi(kept)
    image.set_roi(line)

    measure_and_label(image, dialog_factory=scripted_dialog(press="cancel"), roi_manager=manager)
    assert manager.get_rois_as_array() == [kept]


def test_every_change_keeps_a_single_label(image, line, scripted_dialog):
    image.set_roi(line)
    changes = [
        (TEXT_LOCATION, 'top'),
        (LENGTH_DIGITS, '3'),
        (FONT_SIZE, '40'),
        (TEXT_LOCATION, 'bottom'),
    ]
    seen = []
    image.add_repaint_listener(
        lambda img: seen.append(len([r for r in img.get_overlay() if isinstance(r, TextRoi)]))
    )

    handler = measure_and_label(image, dialog_factory=scripted_dialog(changes=changes))

    assert seen == [1] * (1 + len(changes))
    assert handler.text_roi.text == "5.000 µm"
    assert handler.text_roi.font.size == 40
    assert (handler.text_roi.x, handler.text_roi.y) == (3, 4)


def test_config_style_defaults(line, scripted_dialog):
    image = ImageDocument(np.zeros((100, 100)))
    image.set_roi(line)
    config = {
        'smart_sizing': False, 'line_width': 5.0, 'font_size': 20.0,
        'line_color': 'cyan', 'text_color': 'black', 'text_location': 'bottom',
        'length_digits': 2, 'save_to_overlay': True, 'font_family': 'Sans',
    }
    handler = measure_and_label(image, config=config, dialog_factory=scripted_dialog())

    assert line.stroke_color == 'cyan'
    assert handler.text_roi.text == "5.00 pixel"
    assert handler.text_roi.font.family == 'Sans'
    assert (handler.text_roi.x, handler.text_roi.y) == (3, 4)


def test_existing_overlay_items_survive(image, line, scripted_dialog):
    overlay = Overlay()
    other = LineRoi(x1=50, y1=50, x2=60, y2=60)
    overlay.add(other)
    image.set_overlay(overlay)
    image.set_roi(line)

    measure_and_label(image, dialog_factory=scripted_dialog(press="cancel"))
    assert overlay.to_list() == [other]


def test_bad_configured_color_leaves_overlay_unchanged(image, line, scripted_dialog):
    image.set_roi(line)
    factory = scripted_dialog()

    with pytest.raises(ValueError):
        measure_and_label(image, config={'line_color': 'whte'}, dialog_factory=factory)

    assert image.get_overlay().size() == 0
    assert factory.built == []
    assert image.get_roi() is line
