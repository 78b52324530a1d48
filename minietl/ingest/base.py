from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer

from minietl.core.datetime_utils import to_iso_z


class LaunchRecord(BaseModel):
    """A single launch as returned by the source.

    ``rocket`` and ``launchpad`` keep whatever shape the source sends (an id
    or an expanded object). Undeclared fields such as ``payloads`` are carried
    through untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    name: str
    date_utc: datetime
    success: bool | None = None
    upcoming: bool = False
    rocket: Any = None
    launchpad: Any = None

    @field_serializer("date_utc")
    def _serialize_date(self, value: datetime) -> str:
        return to_iso_z(value)


class Acquisition(BaseModel):
    """Outcome of one source acquisition."""

    model_config = ConfigDict(frozen=True)

    records: tuple[LaunchRecord, ...]
    source_url: str
    fallback_used: bool
    fetched_at: datetime
