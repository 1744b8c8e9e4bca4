import logging

from plateguard.application.camera_lifecycle_manager import CameraLifecycleManager
from plateguard.application.detection_orchestrator import DetectionOrchestrator
from plateguard.application.ocr_engine_adapter import OCREngineAdapter
from plateguard.core.config import settings
from plateguard.domain.Interfaces.plate_record_repository import IPlateRecordRepository
from plateguard.domain.Services.plate_text_validator import PlateTextValidator
from plateguard.infrastructure.Camera.camera_factory import create_camera_platform
from plateguard.infrastructure.Normalizer.plate_normalizer import PlateNormalizer
from plateguard.infrastructure.OCR.factory import create_recognition_worker

logger = logging.getLogger(__name__)


def build_orchestrator() -> DetectionOrchestrator:
    """
    Wires camera, OCR engine and validator from settings.
    Nothing is opened here: the camera starts on start(), the engine on first use.
    """
    camera = CameraLifecycleManager(create_camera_platform())
    engine = OCREngineAdapter(create_recognition_worker)
    validator = PlateTextValidator(normalizer=PlateNormalizer())

    logger.info(
        f"🧩 Pipeline: engine={settings.ocr_engine} resolution={settings.camera_resolution} "
        f"min_confidence={settings.ocr_min_confidence}"
    )
    return DetectionOrchestrator(camera=camera, engine=engine, validator=validator)


def build_record_repository() -> IPlateRecordRepository:
    if settings.storage_backend.lower() == "sql":
        from plateguard.infrastructure.Database.session import create_db_engine, init_db
        from plateguard.infrastructure.Storage.sql_plate_record_repository import SqlPlateRecordRepository
        return SqlPlateRecordRepository(init_db(create_db_engine()))

    from plateguard.infrastructure.Storage.memory_plate_record_repository import MemoryPlateRecordRepository
    return MemoryPlateRecordRepository()
