from plateguard.core.config import settings
from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker


def create_recognition_worker() -> IRecognitionWorker:
    engine = settings.ocr_engine.lower()
    if engine == "easyocr":
        from plateguard.infrastructure.OCR.EasyOCR_RecognitionWorker import EasyOCR_RecognitionWorker
        return EasyOCR_RecognitionWorker(lang=settings.ocr_lang, gpu=settings.ocr_gpu)
    if engine == "dummy":
        from plateguard.infrastructure.OCR.dummy_recognition_worker import DummyRecognitionWorker
        return DummyRecognitionWorker()
    if engine == "tesseract":
        from plateguard.infrastructure.OCR.Tesseract_RecognitionWorker import Tesseract_RecognitionWorker
        return Tesseract_RecognitionWorker(lang=settings.ocr_lang)
    raise ValueError(f"Unknown OCR_ENGINE: {settings.ocr_engine}")
