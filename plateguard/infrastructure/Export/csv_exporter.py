import csv
import io
from typing import Iterable

from plateguard.domain.Models.plate_record import PlateRecord

CSV_HEADER = ["ID", "Plate Number", "Confidence", "Timestamp", "Processed", "Notes"]


def export_records_csv(records: Iterable[PlateRecord]) -> str:
    """
    CSV with one row per record, in the order given. Images are never exported.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in records:
        writer.writerow([
            r.id,
            r.plate_number,
            r.confidence,
            r.timestamp.isoformat() if r.timestamp else "",
            r.processed,
            r.notes or "",
        ])
    return buf.getvalue()


def export_filename(day) -> str:
    return f"plate_records_{day.isoformat()}.csv"
