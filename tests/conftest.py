import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from measurelabel.core.dialog_model import DialogModel
from measurelabel.core.image_document import Calibration, ImageDocument, set_current_image
from measurelabel.core.overlay import RoiManager
from measurelabel.core.rois import LineRoi


@pytest.fixture(autouse=True)
def reset_host_state():
    RoiManager.close()
    set_current_image(None)
    yield
    RoiManager.close()
    set_current_image(None)


@pytest.fixture
def image():
    """600x400 image calibrated 1 µm per pixel"""
    return ImageDocument(np.zeros((400, 600), dtype=np.uint8), title="blank.tif",
                         calibration=Calibration(unit="micron"))


@pytest.fixture
def repaints(image):
    calls = []
    image.add_repaint_listener(calls.append)
    return calls


@pytest.fixture
def line():
    return LineRoi(x1=0, y1=0, x2=3, y2=4)


class ScriptedDialog(DialogModel):
    """Dialog that replays field changes, then presses OK or Cancel"""

    def __init__(self, settings, changes=(), press="ok"):
        super().__init__(settings)
        self.changes = list(changes)
        self.press = press
        self.shown = False

    def show_dialog(self):
        self.shown = True
        self.notify_shown()
        for label, value in self.changes:
            self.set_field(label, value)
        if self.press == "ok":
            self.ok()
        else:
            self.cancel()


@pytest.fixture
def scripted_dialog():
    """Factory for measure_and_label's dialog_factory argument; keeps the dialogs it built"""
    built = []

    def make(changes=(), press="ok"):
        def factory(settings):
            dialog = ScriptedDialog(settings, changes, press)
            built.append(dialog)
            return dialog
        factory.built = built
        return factory

    return make
