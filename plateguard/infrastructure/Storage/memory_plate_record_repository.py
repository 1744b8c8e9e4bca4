# plateguard/infrastructure/Storage/memory_plate_record_repository.py
import threading
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from plateguard.domain.Interfaces.plate_record_repository import IPlateRecordRepository
from plateguard.domain.Models.plate_record import PlateRecord


def start_of_today(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now().astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


class MemoryPlateRecordRepository(IPlateRecordRepository):
    """Plate records kept in a dict. Nothing survives a restart."""

    def __init__(self):
        self._records: Dict[str, PlateRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: PlateRecord) -> PlateRecord:
        stored = record.with_id(uuid.uuid4().hex, datetime.now())
        with self._lock:
            self._records[stored.id] = stored
        return stored

    def get_by_id(self, record_id: str) -> Optional[PlateRecord]:
        return self._records.get(record_id)

    def get_all(self) -> List[PlateRecord]:
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def get_today(self) -> List[PlateRecord]:
        midnight = start_of_today()
        return [r for r in self.get_all() if r.timestamp >= midnight]

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._records)
            self._records.clear()
        return count
