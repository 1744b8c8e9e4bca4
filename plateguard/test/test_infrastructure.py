import asyncio

import cv2
import numpy as np
import pytest

from plateguard.application.camera_lifecycle_manager import CameraLifecycleManager
from plateguard.core.config import settings
from plateguard.domain.exceptions import DeviceEnumerationError
from plateguard.infrastructure.Camera import camera_factory
from plateguard.infrastructure.Camera.fake_camera_stream import FakeCameraPlatform
from plateguard.infrastructure.OCR import factory as ocr_factory
from plateguard.infrastructure.OCR.dummy_recognition_worker import DummyRecognitionWorker

from conftest import make_frame


def test_fake_platform_serves_still_images(tmp_path):
    front = tmp_path / "front.png"
    rear = tmp_path / "rear_gate.png"
    cv2.imwrite(str(front), np.zeros((120, 200, 3), dtype=np.uint8))
    cv2.imwrite(str(rear), np.full((90, 160, 3), 255, dtype=np.uint8))

    manager = CameraLifecycleManager(FakeCameraPlatform([str(front), str(rear)]))

    async def scenario():
        async with manager:
            await manager.enumerate_devices()
            await manager.start()
            return manager.capture_frame()

    frame = asyncio.run(scenario())
    # "rear" in the label wins the selection
    assert manager.current_device_id == "1"
    assert (frame.width, frame.height) == (160, 90)


def test_fake_platform_without_sources_fails_enumeration():
    with pytest.raises(DeviceEnumerationError):
        FakeCameraPlatform([]).list_devices()


def test_camera_factory_honours_fake_flag(monkeypatch):
    monkeypatch.setattr(settings, "use_fake_cam", True)
    monkeypatch.setattr(settings, "fake_cam_sources", "a.png, b.mp4")
    platform = camera_factory.create_camera_platform()
    assert isinstance(platform, FakeCameraPlatform)
    assert platform.sources == ["a.png", "b.mp4"]


def test_ocr_factory(monkeypatch):
    monkeypatch.setattr(settings, "ocr_engine", "dummy")
    assert isinstance(ocr_factory.create_recognition_worker(), DummyRecognitionWorker)

    monkeypatch.setattr(settings, "ocr_engine", "paddle")
    with pytest.raises(ValueError):
        ocr_factory.create_recognition_worker()


def test_tesseract_worker_parses_word_rows(monkeypatch):
    pytesseract = pytest.importorskip("pytesseract")
    from plateguard.infrastructure.OCR.Tesseract_RecognitionWorker import Tesseract_RecognitionWorker

    captured = {}

    def fake_image_to_data(image, lang, config, output_type):
        captured["config"] = config
        return {
            "text": ["", "AB12", "CD", "", "XY9"],
            "conf": ["-1", "90", "80", "-1", 70.5],
            "left": [0, 10, 60, 0, 5],
            "top": [0, 5, 5, 0, 40],
            "width": [0, 40, 20, 0, 30],
            "height": [0, 20, 20, 0, 20],
            "block_num": [1, 1, 1, 1, 1],
            "par_num": [1, 1, 1, 1, 1],
            "line_num": [0, 1, 1, 2, 2],
        }

    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)

    output = Tesseract_RecognitionWorker().recognize(make_frame(80, 60))

    assert "--psm 6" in captured["config"]
    assert "tessedit_char_whitelist=ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789" in captured["config"]
    assert [w.text for w in output.words] == ["AB12", "CD", "XY9"]
    assert output.words[0].bbox.x1 == 50
    assert output.full_text == "AB12 CD\nXY9"
    assert output.confidence == pytest.approx((90 + 80 + 70.5) / 3)


def test_easyocr_worker_scales_confidence(monkeypatch):
    easyocr = pytest.importorskip("easyocr")
    from plateguard.infrastructure.OCR.EasyOCR_RecognitionWorker import EasyOCR_RecognitionWorker

    class FakeReader:
        def __init__(self, langs, gpu):
            self.langs = langs

        def readtext(self, image, allowlist, detail, paragraph):
            assert allowlist == "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
            return [([[1, 2], [41, 2], [41, 22], [1, 22]], "KL55AB", 0.87)]

    monkeypatch.setattr(easyocr, "Reader", FakeReader)

    worker = EasyOCR_RecognitionWorker(lang="eng")
    output = worker.recognize(make_frame())

    assert worker.lang == "en"
    assert output.words[0].confidence == pytest.approx(87.0)
    assert (output.words[0].bbox.x0, output.words[0].bbox.y1) == (1, 22)
    assert output.full_text == "KL55AB"
