"""Record output.

CSV is the persisted format: its header is RECORD_FIELDS, in Record
field order, and the reconciliation tool reads it back. JSONL is offered
for consumers that prefer typed values.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from typing import Any, TextIO

from strictly.data_types import RECORD_FIELDS, Record


def record_to_row(record: Record) -> dict[str, Any]:
    row = record.model_dump()
    row["average_score"] = f"{record.average_score:.2f}"
    return row


def write_csv(
    records: Iterable[Record], stream: TextIO, header: bool = True
) -> int:
    """Write records as CSV. Returns the number of records written."""
    writer = csv.DictWriter(
        stream, fieldnames=list(RECORD_FIELDS), lineterminator="\n"
    )
    if header:
        writer.writeheader()
    count = 0
    for record in records:
        writer.writerow(record_to_row(record))
        count += 1
    return count


def write_jsonl(records: Iterable[Record], stream: TextIO) -> int:
    """Write one JSON object per line. Returns the number written."""
    count = 0
    for record in records:
        stream.write(record.model_dump_json() + "\n")
        count += 1
    return count
