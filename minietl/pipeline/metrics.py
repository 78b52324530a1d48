"""Batch metrics.

A record that is both successful and upcoming is counted in ``rows_out`` and
in ``upcoming``; the counts are independent of each other.
"""

from collections.abc import Sequence

from minietl.ingest.base import Acquisition, LaunchRecord
from minietl.schemas.run import Metrics, RunResult

NO_MISSION = "N/A"


def compute_metrics(records: Sequence[LaunchRecord]) -> Metrics:
    """
    Derive aggregate counts from a launch batch.

    Args:
        records: Batch in source order

    Returns:
        Metrics snapshot; an empty batch yields zeros and ``"N/A"``
    """
    rows_in = len(records)
    rows_out = sum(1 for r in records if r.success)
    upcoming = sum(1 for r in records if r.upcoming)

    return Metrics(
        rows_in=rows_in,
        rows_out=rows_out,
        dedup_removed=rows_in - rows_out,
        upcoming=upcoming,
        last_mission=records[-1].name if records else NO_MISSION,
    )


def build_run_result(acquisition: Acquisition) -> RunResult:
    """Bundle an acquisition with its metrics."""
    return RunResult(
        launches=acquisition.records,
        metrics=compute_metrics(acquisition.records),
        source_url=acquisition.source_url,
        fallback_used=acquisition.fallback_used,
        fetched_at=acquisition.fetched_at,
    )
