"""Comma-separated export of a launch batch."""

from collections.abc import Sequence
from datetime import datetime

from minietl.core.datetime_utils import to_iso_z
from minietl.ingest.base import LaunchRecord

EXPORT_COLUMNS = ("id", "name", "date_utc", "success", "upcoming", "rocket", "launchpad")


def format_csv_value(value: object) -> str:
    """Quote a single field; missing values become an empty quoted field."""
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, datetime):
        text = to_iso_z(value)
    else:
        text = str(value)
    return '"' + text.replace('"', '""') + '"'


def to_delimited_text(
    records: Sequence[LaunchRecord],
    columns: Sequence[str] = EXPORT_COLUMNS,
) -> str:
    """
    Serialize a column projection of ``records``.

    The header row holds the bare column names; every data value is quoted
    and ``date_utc`` is written as canonical ISO-8601 UTC.

    Args:
        records: Batch to export, in order
        columns: Attribute names to project, in order

    Returns:
        Rows joined with newlines, without a trailing newline
    """
    rows = [",".join(columns)]
    for record in records:
        rows.append(",".join(format_csv_value(getattr(record, col, None)) for col in columns))
    return "\n".join(rows)
