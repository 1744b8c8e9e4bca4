from abc import ABC, abstractmethod
from typing import List, Optional
from plateguard.domain.Models.plate_record import PlateRecord

class IPlateRecordRepository(ABC):

    @abstractmethod
    def create(self, record: PlateRecord) -> PlateRecord:
        """Stores the record and returns it with a generated id."""
        pass

    @abstractmethod
    def get_by_id(self, record_id: str) -> Optional[PlateRecord]:
        pass

    @abstractmethod
    def get_all(self) -> List[PlateRecord]:
        """Newest first."""
        pass

    def get_recent(self, limit: int = 10) -> List[PlateRecord]:
        return self.get_all()[:limit]

    def search(self, term: Optional[str] = None, sort_by: str = "timestamp") -> List[PlateRecord]:
        """
        Records whose plate contains `term` (case-insensitive) or whose date
        (YYYY-MM-DD) contains it. Sorted newest first, by plate A-Z, or by
        confidence high to low.
        """
        records = self.get_all()
        if term:
            needle = term.strip().lower()
            records = [
                r for r in records
                if needle in r.plate_number.lower()
                or (r.timestamp is not None and needle in r.timestamp.date().isoformat())
            ]

        if sort_by == "plate_number":
            return sorted(records, key=lambda r: r.plate_number)
        if sort_by == "confidence":
            return sorted(records, key=lambda r: -r.confidence)
        if sort_by != "timestamp":
            raise ValueError(f"Unknown sort key: {sort_by}")
        return sorted(records, key=lambda r: r.timestamp.timestamp() if r.timestamp else 0.0, reverse=True)

    @abstractmethod
    def get_today(self) -> List[PlateRecord]:
        pass

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        pass

    @abstractmethod
    def clear(self) -> int:
        """Deletes everything; returns how many records were removed."""
        pass

    def stats(self) -> dict:
        records = self.get_all()
        total = len(records)
        processed = sum(1 for r in records if r.processed == 1)
        return {
            "total": total,
            "today": len(self.get_today()),
            "success_rate": int(processed * 100 / total + 0.5) if total else 0,
        }
