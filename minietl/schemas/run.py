from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from minietl.core.datetime_utils import to_iso_z
from minietl.ingest.base import LaunchRecord


class Metrics(BaseModel):
    """Aggregate counts over exactly one launch batch."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rows_in: int
    rows_out: int
    dedup_removed: int
    upcoming: int
    last_mission: str = Field(alias="lastMission")


class RunResult(BaseModel):
    """Batch, metrics and provenance of one pipeline run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    launches: tuple[LaunchRecord, ...]
    metrics: Metrics
    source_url: str = Field(alias="sourceUrl")
    fallback_used: bool = Field(alias="fallbackUsed")
    fetched_at: datetime = Field(alias="fetchedAt")

    @field_serializer("fetched_at")
    def _serialize_fetched_at(self, value: datetime) -> str:
        return to_iso_z(value)
