import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Callable, Literal, Optional

from fastapi import FastAPI, HTTPException, Response

from plateguard.application.detection_orchestrator import DetectionOrchestrator
from plateguard.application.pipeline_factory import build_orchestrator, build_record_repository
from plateguard.core.config import settings
from plateguard.domain.exceptions import CameraAccessError, DeviceEnumerationError
from plateguard.domain.Interfaces.plate_record_repository import IPlateRecordRepository
from plateguard.domain.Models.detection_result import DetectionResult
from plateguard.domain.Models.plate_record import PlateRecord
from plateguard.infrastructure.Export.csv_exporter import export_filename, export_records_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


def create_app(
    orchestrator_factory: Callable[[], DetectionOrchestrator] = build_orchestrator,
    repository: Optional[IPlateRecordRepository] = None,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        orchestrator = orchestrator_factory()
        app.state.orchestrator = orchestrator
        app.state.records = repository or build_record_repository()
        # camera and OCR worker are released on shutdown, whatever happened
        async with orchestrator:
            yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    def pipeline() -> DetectionOrchestrator:
        return app.state.orchestrator

    @app.get("/health")
    def health_check():
        return {"status": "ok", "env": settings.app_env}

    @app.get("/status")
    def status():
        orch = pipeline()
        return {
            "detection": orch.status.value,
            "message": orch.message,
            "camera": orch.camera.state.value,
            "camera_error": orch.camera.error,
            "device_id": orch.camera.current_device_id,
            "engine": orch.engine.state.value,
        }

    @app.get("/devices")
    async def devices():
        try:
            found = await pipeline().camera.enumerate_devices()
        except DeviceEnumerationError as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return [d.to_dict() for d in found]

    @app.post("/camera/start")
    async def camera_start():
        camera = pipeline().camera
        try:
            if not camera.devices:
                await camera.enumerate_devices()
            await camera.start()
        except (DeviceEnumerationError, CameraAccessError) as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return {"camera": camera.state.value, "device_id": camera.current_device_id}

    @app.post("/camera/stop")
    async def camera_stop():
        camera = pipeline().camera
        await camera.stop()
        return {"camera": camera.state.value}

    @app.post("/camera/switch")
    async def camera_switch():
        camera = pipeline().camera
        try:
            await camera.switch_device()
        except CameraAccessError as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return {"camera": camera.state.value, "device_id": camera.current_device_id}

    @app.post("/detect")
    async def detect(save: Optional[bool] = None):
        outcome = await pipeline().detect_once()
        if not isinstance(outcome, DetectionResult):
            return {"accepted": False, **outcome.to_dict()}

        body = {"accepted": True, **outcome.to_dict()}
        if settings.auto_save if save is None else save:
            record = app.state.records.create(PlateRecord.from_detection(outcome))
            body["record_id"] = record.id
        return body

    @app.get("/records")
    def records(
        limit: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Literal["timestamp", "plate_number", "confidence"] = "timestamp",
    ):
        repo: IPlateRecordRepository = app.state.records
        if search or sort_by != "timestamp":
            found = repo.search(search, sort_by)
            if limit:
                found = found[:limit]
        else:
            found = repo.get_recent(limit) if limit else repo.get_all()
        return {"records": [r.to_dict() for r in found], "stats": repo.stats()}

    @app.delete("/records/{record_id}")
    def delete_record(record_id: str):
        if not app.state.records.delete(record_id):
            raise HTTPException(status_code=404, detail="Record not found")
        return {"message": "Record deleted successfully"}

    @app.get("/records/export")
    def export_records():
        csv_text = export_records_csv(app.state.records.get_all())
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{export_filename(date.today())}"'},
        )

    return app


app = create_app()
