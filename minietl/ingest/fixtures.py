"""Offline launch set used whenever live acquisition fails."""

from minietl.core.datetime_utils import parse_iso
from minietl.ingest.base import LaunchRecord


def fallback_launches() -> tuple[LaunchRecord, ...]:
    """Return the fixed demo batch: one success, one failure, one upcoming."""
    return (
        LaunchRecord(
            id="demo-1",
            name="Demo Mission Alpha",
            date_utc=parse_iso("2025-01-12T14:30:00.000Z"),
            success=True,
            upcoming=False,
            rocket="Falcon 9",
            launchpad="LC-39A",
            payloads=[],
        ),
        LaunchRecord(
            id="demo-2",
            name="Demo Mission Beta",
            date_utc=parse_iso("2025-02-02T09:45:00.000Z"),
            success=False,
            upcoming=False,
            rocket="Falcon 9",
            launchpad="SLC-40",
            payloads=[],
        ),
        LaunchRecord(
            id="demo-3",
            name="Demo Mission Gamma",
            date_utc=parse_iso("2025-03-05T18:00:00.000Z"),
            success=False,
            upcoming=True,
            rocket="Starship",
            launchpad="Starbase",
            payloads=[],
        ),
    )
