"""Launch source acquisition.

A single GET against the launches endpoint. Every failure (transport error,
non-2xx status, body that is not a list of launch records) resolves to the
offline fixture batch instead of an exception.
"""

from dataclasses import dataclass

import aiohttp
from pydantic import ValidationError

from minietl.config import get_config, get_settings
from minietl.core.datetime_utils import utc_now
from minietl.core.exceptions import MalformedPayload, MiniETLError, SourceUnavailable
from minietl.core.logging import get_logger
from minietl.ingest.base import Acquisition, LaunchRecord
from minietl.ingest.fixtures import fallback_launches

logger = get_logger(__name__)


@dataclass(frozen=True)
class Ok:
    """Live records, already bounded to the batch window."""

    records: tuple[LaunchRecord, ...]


@dataclass(frozen=True)
class Fallback:
    """Acquisition failed; the fixture batch must be used."""

    reason: MiniETLError


FetchResult = Ok | Fallback


def parse_launches(payload: object, batch_size: int) -> tuple[LaunchRecord, ...]:
    """
    Validate a decoded payload and keep its tail window.

    Args:
        payload: Decoded JSON body
        batch_size: Number of most recent records to keep

    Returns:
        The last ``batch_size`` records in source order

    Raises:
        MalformedPayload: If the payload is not a list of launch records
    """
    if not isinstance(payload, list):
        raise MalformedPayload(f"expected a JSON array, got {type(payload).__name__}")

    window = payload[-batch_size:] if payload else []
    try:
        return tuple(LaunchRecord.model_validate(item) for item in window)
    except ValidationError as e:
        raise MalformedPayload(f"invalid launch record: {e.error_count()} error(s)") from e


async def fetch_launches(url: str, batch_size: int) -> FetchResult:
    """Issue one GET against ``url`` and classify the outcome."""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers={
                    "User-Agent": "MiniETL/1.0",
                    "Accept": "application/json",
                },
            ) as response:
                if not 200 <= response.status < 300:
                    return Fallback(SourceUnavailable(f"SpaceX API {response.status}"))

                payload = await response.json(content_type=None)

    except (aiohttp.ClientError, TimeoutError) as e:
        return Fallback(SourceUnavailable(str(e) or type(e).__name__))
    except ValueError as e:
        # Body is not JSON
        return Fallback(MalformedPayload(str(e)))

    try:
        return Ok(parse_launches(payload, batch_size))
    except MalformedPayload as e:
        return Fallback(e)


async def acquire(source_url: str | None = None) -> Acquisition:
    """
    Fetch the current launch batch, substituting fixtures on failure.

    Args:
        source_url: Optional override; defaults to the configured endpoint

    Returns:
        Acquisition with records, the URL attempted, the fallback flag and
        the completion time
    """
    url = source_url or get_settings().spacex_api_url
    batch_size = get_config().pipeline.batch_size

    result = await fetch_launches(url, batch_size)

    match result:
        case Ok(records=records):
            return Acquisition(
                records=records,
                source_url=url,
                fallback_used=False,
                fetched_at=utc_now(),
            )
        case Fallback(reason=reason):
            logger.bind(
                url=url,
                reason=type(reason).__name__,
                error=str(reason),
            ).warning("spacex_fetch_failed")
            return Acquisition(
                records=fallback_launches(),
                source_url=url,
                fallback_used=True,
                fetched_at=utc_now(),
            )
