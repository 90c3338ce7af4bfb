"""CSV report of a NEO view.

Rows are written in the order given; the exporter never re-sorts. Each row uses
the record's nearest close-approach event. Numbers are raw (no thousands
separators): diameter to 3 decimals, distance and velocity truncated to whole
units.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from neowatch.feed import NeoRecord
from neowatch.risk import classify, nearest_approach

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

HEADER = [
    "Object Designation",
    "Diameter (km)",
    "Miss Distance (km)",
    "Velocity (km/h)",
    "Risk Level",
    "Hazardous",
]


def report_filename(day: date) -> str:
    return f"neo_report_{day.isoformat()}.csv"


def report_row(record: NeoRecord) -> list[str]:
    approach = nearest_approach(record)
    return [
        record.name,
        f"{record.diameter_max_km:.3f}",
        str(int(approach.miss_distance_km)),
        str(int(approach.velocity_km_h)),
        classify(record).value,
        "Yes" if record.hazardous else "No",
    ]


def build_csv(records: Iterable[NeoRecord]) -> str:
    """Header plus one line per record, newline-terminated.

    Fields are only quoted when they contain a comma or quote, which NeoWs
    designations normally never do.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    count = 0
    for record in records:
        writer.writerow(report_row(record))
        count += 1
    logger.debug("Built CSV report with %d rows", count)
    return buf.getvalue()


def write_report(records: Iterable[NeoRecord], directory: Path | str, day: date) -> Path:
    path = Path(directory) / report_filename(day)
    content = build_csv(records)
    with path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(content)
    logger.info("Saved NEO report to '%s'.", path)
    return path
