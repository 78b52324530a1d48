from minietl.ingest.base import Acquisition, LaunchRecord
from minietl.ingest.fixtures import fallback_launches
from minietl.ingest.spacex import Fallback, Ok, acquire, fetch_launches, parse_launches

__all__ = [
    "Acquisition",
    "LaunchRecord",
    "Ok",
    "Fallback",
    "acquire",
    "fallback_launches",
    "fetch_launches",
    "parse_launches",
]
