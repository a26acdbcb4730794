import json

import numpy as np
import pytest
from PIL import Image

from measurelabel.core.overlay import RoiManager
from measurelabel.core.rois import LineRoi, TextRoi
from measurelabel.utils.file_io import ImageLoader, export_rois_json


@pytest.fixture
def loader():
    return ImageLoader()


def test_loads_png_uncalibrated(tmp_path, loader):
    path = tmp_path / "cells.png"
    Image.fromarray(np.full((20, 30), 128, dtype=np.uint8)).save(path)

    image = loader.load_image(path)
    assert image.title == "cells.png"
    assert (image.width, image.height) == (30, 20)
    assert image.get_calibration().get_unit() == "pixel"
    assert not image.get_calibration().scaled()


def test_reads_imagej_tiff_calibration(tmp_path, loader):
    path = tmp_path / "calibrated.tif"
    Image.fromarray(np.zeros((20, 30), dtype=np.uint8)).save(
        path,
        description="ImageJ=1.53t\nunit=micron\n",
        resolution=4.0,
    )

    calibration = loader.load_image(path).get_calibration()
    assert calibration.get_unit() == "µm"
    assert calibration.pixel_width == pytest.approx(0.25)
    assert calibration.pixel_height == pytest.approx(0.25)


def test_reads_tiff_resolution_unit(tmp_path, loader):
    path = tmp_path / "scan.tif"
    Image.fromarray(np.zeros((10, 10), dtype=np.uint8)).save(
        path,
        resolution=10.0,
        resolution_unit=3,
    )

    calibration = loader.load_image(path).get_calibration()
    assert calibration.get_unit() == "cm"
    assert calibration.pixel_width == pytest.approx(0.1)


def test_palette_images_are_converted(tmp_path, loader):
    path = tmp_path / "palette.png"
    Image.fromarray(np.zeros((8, 8), dtype=np.uint8)).convert('P').save(path)
    image = loader.load_image(path)
    assert image.data.shape == (8, 8, 4)


def test_missing_file_returns_none(tmp_path, loader):
    assert loader.load_image(tmp_path / "nope.tif") is None


def test_image_info(tmp_path, loader):
    path = tmp_path / "info.png"
    Image.fromarray(np.zeros((5, 7, 3), dtype=np.uint8)).save(path)
    info = loader.load_image_info(path)
    assert info['size'] == (7, 5)
    assert info['mode'] == 'RGB'
    assert info['unit'] == 'pixel'


def test_export_rois_json(tmp_path):
    manager = RoiManager()
    manager.add_roi(LineRoi(x1=0, y1=0, x2=3, y2=4))
    manager.add_roi(TextRoi(x=1.5, y=2, text="5.00 µm"))

    path = export_rois_json(manager.export_rois(), tmp_path / "out" / "rois.json")
    with open(path, encoding='utf-8') as f:
        data = json.load(f)

    assert [roi['type'] for roi in data['rois']] == ['line', 'text']
    assert data['rois'][1]['text'] == "5.00 µm"
