"""Client for a running server's restart control endpoint."""

import aiohttp
from pydantic import ValidationError

from minietl.core.exceptions import RestartFailure
from minietl.core.logging import get_logger
from minietl.schemas.run import RunResult

logger = get_logger(__name__)

RESTART_PATH = "/api/etl/restart"


class RemoteRunSource:
    """
    Fetch RunResults by triggering a restart on a remote server.

    Instances are callable with the same signature as ``fetch_run`` so they
    can be handed to a ``RunController`` as its fetcher. The source URL
    argument is ignored: the server uses its own configured source.
    """

    def __init__(self, base_url: str) -> None:
        """
        Initialize remote source.

        Args:
            base_url: Server root, e.g. ``http://localhost:8000``
        """
        self.base_url = base_url.rstrip("/")

    @property
    def restart_url(self) -> str:
        return f"{self.base_url}{RESTART_PATH}"

    async def __call__(self, source_url: str | None = None) -> RunResult:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    self.restart_url,
                    headers={"Accept": "application/json"},
                ) as response:
                    if not 200 <= response.status < 300:
                        raise RestartFailure(f"HTTP {response.status}")
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise RestartFailure(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise RestartFailure(f"invalid JSON: {e}") from e

        try:
            result = RunResult.model_validate(payload)
        except ValidationError as e:
            raise RestartFailure(f"unexpected payload: {e.error_count()} error(s)") from e

        logger.bind(url=self.restart_url, rows_in=result.metrics.rows_in).debug(
            "remote_restart_received"
        )
        return result
