# plateguard/infrastructure/Storage/sql_plate_record_repository.py
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from plateguard.domain.Interfaces.plate_record_repository import IPlateRecordRepository
from plateguard.domain.Models.plate_record import PlateRecord
from plateguard.infrastructure.Database.entities.plate_record_entity import PlateRecordEntity
from plateguard.infrastructure.Storage.memory_plate_record_repository import start_of_today


class SqlPlateRecordRepository(IPlateRecordRepository):
    """Plate record repository on SQLAlchemy. One short session per call."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def create(self, record: PlateRecord) -> PlateRecord:
        stored = record.with_id(uuid.uuid4().hex, datetime.now())
        with self.session_factory() as db:
            entity = stored.to_entity()
            db.add(entity)
            db.commit()
            db.refresh(entity)
            return PlateRecord.from_entity(entity)

    def get_by_id(self, record_id: str) -> Optional[PlateRecord]:
        with self.session_factory() as db:
            entity = db.get(PlateRecordEntity, record_id)
            return PlateRecord.from_entity(entity) if entity else None

    def get_all(self) -> List[PlateRecord]:
        with self.session_factory() as db:
            entities = (
                db.query(PlateRecordEntity)
                .order_by(PlateRecordEntity.timestamp.desc())
                .all()
            )
            return [PlateRecord.from_entity(e) for e in entities]

    def get_recent(self, limit: int = 10) -> List[PlateRecord]:
        with self.session_factory() as db:
            entities = (
                db.query(PlateRecordEntity)
                .order_by(PlateRecordEntity.timestamp.desc())
                .limit(limit)
                .all()
            )
            return [PlateRecord.from_entity(e) for e in entities]

    def get_today(self) -> List[PlateRecord]:
        with self.session_factory() as db:
            entities = (
                db.query(PlateRecordEntity)
                .filter(PlateRecordEntity.timestamp >= start_of_today())
                .order_by(PlateRecordEntity.timestamp.desc())
                .all()
            )
            return [PlateRecord.from_entity(e) for e in entities]

    def delete(self, record_id: str) -> bool:
        with self.session_factory() as db:
            entity = db.get(PlateRecordEntity, record_id)
            if entity is None:
                return False
            db.delete(entity)
            db.commit()
            return True

    def clear(self) -> int:
        with self.session_factory() as db:
            count = db.query(PlateRecordEntity).delete()
            db.commit()
            return count
