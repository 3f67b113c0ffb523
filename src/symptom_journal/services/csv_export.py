"""
CSV export service.

Serializes the entry collection to the fixed-column spreadsheet format:
one header row, then one row per entry in store order. Text columns are
double-quoted, severities are bare integers and dates use a short
month/day/year form.
"""

import csv
import io
import logging
from collections.abc import Sequence

import pandas as pd

from symptom_journal.domain.catalog import CSV_COLUMNS, FieldKind, field_kind
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.utils.timezone_utils import format_short_date

logger = logging.getLogger(__name__)

CSV_HEADER: tuple[str, ...] = tuple(header for header, _ in CSV_COLUMNS)

_SEVERITY_COLUMNS: tuple[str, ...] = tuple(
    header
    for header, attr in CSV_COLUMNS
    if attr != "date" and field_kind(attr) == FieldKind.SEVERITY
)


class CSVExporter:
    """
    Exporter for the CSV spreadsheet format.

    Rows keep store order; they are not sorted by date.
    """

    def __init__(self, timezone_str: str = "UTC") -> None:
        """
        Initialize CSV exporter.

        Args:
            timezone_str: Timezone used to render entry dates.
        """
        self.timezone_str = timezone_str

    def _row(self, entry: SymptomEntry) -> list[object]:
        row: list[object] = []
        for _, attr in CSV_COLUMNS:
            if attr == "date":
                row.append(format_short_date(entry.date, self.timezone_str))
            else:
                row.append(getattr(entry, attr))
        return row

    def to_csv(self, entries: Sequence[SymptomEntry]) -> str:
        """
        Render entries as CSV text.

        Embedded double quotes are doubled so every field round-trips
        through standard CSV readers; the column layout is unchanged.

        Args:
            entries: Entries in the order they should appear.

        Returns:
            Header line, then one line per entry. The last row carries no
            trailing newline.
        """
        header = ",".join(CSV_HEADER)
        if not entries:
            return header + "\n"

        df = pd.DataFrame([self._row(e) for e in entries], columns=list(CSV_HEADER))
        df = df.astype({column: "int64" for column in _SEVERITY_COLUMNS})

        buffer = io.StringIO()
        df.to_csv(
            buffer,
            index=False,
            header=False,
            quoting=csv.QUOTE_NONNUMERIC,
            lineterminator="\n",
        )
        body = buffer.getvalue().removesuffix("\n")

        logger.info(f"Exported {len(entries)} entries to CSV")
        return header + "\n" + body
