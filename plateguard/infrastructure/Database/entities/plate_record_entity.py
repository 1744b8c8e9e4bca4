# plateguard/infrastructure/Database/entities/plate_record_entity.py
from sqlalchemy import Column, String, Integer, Float, DateTime, Text
from plateguard.infrastructure.Database.base import Base

class PlateRecordEntity(Base):
    __tablename__ = "plate_records"

    id = Column(String(32), primary_key=True)
    plate_number = Column(String(16), nullable=False, index=True)
    confidence = Column(Float, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    image_data = Column(Text, nullable=True)
    processed = Column(Integer, default=0)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return (
            f"<PlateRecordEntity(id='{self.id}', plate='{self.plate_number}', "
            f"confidence={self.confidence}, processed={self.processed})>"
        )
