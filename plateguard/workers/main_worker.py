import warnings
warnings.filterwarnings("ignore")

import asyncio
import logging

from plateguard.application.pipeline_factory import build_orchestrator, build_record_repository
from plateguard.core.config import settings
from plateguard.domain.exceptions import (
    CameraAccessError,
    DeviceEnumerationError,
    OCREngineInitError,
    RecordStoreError,
)
from plateguard.domain.Models.detection_result import DetectionResult
from plateguard.domain.Models.plate_record import PlateRecord
from plateguard.infrastructure.Export.csv_exporter import export_records_csv
from plateguard.monitoring.metrics import start_metrics_server

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

HELP = "[enter] capture & scan   s switch camera   e export CSV   q quit"


async def run():
    try:
        repo = build_record_repository()
    except RecordStoreError as exc:
        logger.error(f"❌ {exc}")
        return
    orchestrator = build_orchestrator()

    async with orchestrator:
        camera = orchestrator.camera
        try:
            await camera.enumerate_devices()
            await camera.start()
        except (DeviceEnumerationError, CameraAccessError) as exc:
            logger.error(f"❌ Camera unavailable: {exc}")
            return

        # warm the worker up before the first trigger
        try:
            await orchestrator.engine.initialize()
        except OCREngineInitError as exc:
            logger.error(f"❌ {exc}")
            return
        logger.info(f"🚀 PlateGuard ready on camera {camera.current_device_id}. {HELP}")

        while True:
            command = (await asyncio.to_thread(input, "> ")).strip().lower()

            if command == "q":
                break
            if command == "s":
                await camera.switch_device()
                logger.info(f"📷 Camera {camera.current_device_id}")
                continue
            if command == "e":
                print(export_records_csv(repo.get_all()), end="")
                continue

            outcome = await orchestrator.detect_once()
            if isinstance(outcome, DetectionResult):
                print(f"{outcome.plate_number}  {outcome.confidence:.0f}%")
                if settings.auto_save:
                    record = repo.create(PlateRecord.from_detection(outcome))
                    logger.info(f"💾 Saved record {record.id}")
            else:
                print(outcome.message)

    logger.info("🧠 Stopped.")


def main():
    start_metrics_server(port=settings.metrics_port)
    try:
        asyncio.run(run())
    except (KeyboardInterrupt, EOFError):
        logger.info("🧠 Stopping…")


if __name__ == "__main__":
    main()
