# plateguard/domain/Models/plate_record.py
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from plateguard.domain.Models.detection_result import DetectionResult

if TYPE_CHECKING:
    from plateguard.infrastructure.Database.entities.plate_record_entity import PlateRecordEntity


def local_time(ts: Optional[datetime]) -> Optional[datetime]:
    """Timezone-aware local time; naive values are taken as local wall time."""
    return ts.astimezone() if ts is not None else None


@dataclass
class PlateRecord:
    """
    Persisted plate detection, as stored by the record repository.
    `id` is generated by the repository on create.
    """
    plate_number: str
    confidence: float
    timestamp: Optional[datetime] = None
    image_data: Optional[str] = None
    processed: int = 0
    notes: Optional[str] = None
    id: Optional[str] = None

    @staticmethod
    def from_detection(result: DetectionResult, notes: Optional[str] = None) -> "PlateRecord":
        return PlateRecord(
            plate_number=result.plate_number,
            confidence=result.confidence,
            timestamp=result.timestamp,
            image_data=result.image_data,
            processed=1,
            notes=notes,
        )

    @staticmethod
    def from_entity(entity: "PlateRecordEntity") -> "PlateRecord":
        return PlateRecord(
            id=entity.id,
            plate_number=entity.plate_number,
            confidence=entity.confidence,
            timestamp=local_time(entity.timestamp),
            image_data=entity.image_data,
            processed=entity.processed,
            notes=entity.notes,
        )

    def to_entity(self):
        from plateguard.infrastructure.Database.entities.plate_record_entity import PlateRecordEntity
        return PlateRecordEntity(
            id=self.id,
            plate_number=self.plate_number,
            confidence=self.confidence,
            timestamp=self.timestamp,
            image_data=self.image_data,
            processed=self.processed,
            notes=self.notes,
        )

    def with_id(self, record_id: str, timestamp: datetime) -> "PlateRecord":
        return replace(self, id=record_id, timestamp=local_time(self.timestamp or timestamp))

    def to_dict(self, include_image: bool = False) -> dict:
        out = {
            "id": self.id,
            "plate_number": self.plate_number,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "processed": self.processed,
            "notes": self.notes,
        }
        if include_image:
            out["image_data"] = self.image_data
        return out
