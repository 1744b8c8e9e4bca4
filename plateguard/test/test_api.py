from fastapi.testclient import TestClient

from plateguard.api.main import create_app
from plateguard.domain.Models.plate_record import PlateRecord
from plateguard.infrastructure.Storage.memory_plate_record_repository import MemoryPlateRecordRepository


def test_health_status_and_detect_flow(build_orchestrator, platform):
    repo = MemoryPlateRecordRepository()
    app = create_app(orchestrator_factory=build_orchestrator, repository=repo)

    with TestClient(app) as client:
        assert client.get("/health").json()["status"] == "ok"
        assert client.get("/status").json()["detection"] == "idle"

        started = client.post("/camera/start").json()
        assert started == {"camera": "active", "device_id": "0"}

        body = client.post("/detect", params={"save": True}).json()
        assert body["accepted"] is True
        assert body["plate_number"] == "AB12CD"
        assert repo.get_by_id(body["record_id"]) is not None

        listing = client.get("/records").json()
        assert listing["stats"]["total"] == 1

        export = client.get("/records/export")
        assert export.headers["content-type"].startswith("text/csv")
        assert export.text.splitlines()[0] == "ID,Plate Number,Confidence,Timestamp,Processed,Notes"

    # lifespan exit released the camera
    assert platform.disconnects == 1


def test_detect_without_camera_reports_failure(build_orchestrator):
    app = create_app(orchestrator_factory=build_orchestrator, repository=MemoryPlateRecordRepository())

    with TestClient(app) as client:
        body = client.post("/detect").json()

    assert body["accepted"] is False
    assert body["reason"] == "no_frame"


def test_device_listing_failure_is_503(build_orchestrator, platform):
    platform.fail_list = True
    app = create_app(orchestrator_factory=build_orchestrator, repository=MemoryPlateRecordRepository())

    with TestClient(app) as client:
        assert client.get("/devices").status_code == 503


def test_records_search_sort_and_delete(build_orchestrator):
    repo = MemoryPlateRecordRepository()
    low = repo.create(PlateRecord("XYZ789", 71.0))
    repo.create(PlateRecord("ABC123", 95.0))
    repo.create(PlateRecord("ABX001", 88.0))
    app = create_app(orchestrator_factory=build_orchestrator, repository=repo)

    with TestClient(app) as client:
        found = client.get("/records", params={"search": "ab", "sort_by": "confidence"}).json()
        assert [r["plate_number"] for r in found["records"]] == ["ABC123", "ABX001"]

        by_plate = client.get("/records", params={"sort_by": "plate_number", "limit": 2}).json()
        assert [r["plate_number"] for r in by_plate["records"]] == ["ABC123", "ABX001"]

        assert client.get("/records", params={"sort_by": "colour"}).status_code == 422

        assert client.delete(f"/records/{low.id}").json() == {"message": "Record deleted successfully"}
        assert client.delete(f"/records/{low.id}").status_code == 404
        assert client.get("/records").json()["stats"]["total"] == 2
