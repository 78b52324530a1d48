"""
Run orchestration.

A run is: acquire a batch, compute its metrics, publish the RunResult and
restart the stage simulator against it. ``restart`` is guarded by a busy flag
so only one acquisition is ever in flight.
"""

from collections.abc import Awaitable, Callable, Sequence

from minietl.core.logging import get_logger
from minietl.ingest.base import LaunchRecord
from minietl.ingest.spacex import acquire
from minietl.pipeline.export import EXPORT_COLUMNS, to_delimited_text
from minietl.pipeline.metrics import build_run_result
from minietl.pipeline.stages import StageSimulator
from minietl.schemas.run import RunResult

logger = get_logger(__name__)

RunFetcher = Callable[[str | None], Awaitable[RunResult]]


async def fetch_run(source_url: str | None = None) -> RunResult:
    """Acquire a batch from the launch source and bundle its metrics."""
    return build_run_result(await acquire(source_url))


class RunController:
    """Owns the current RunResult and the stage simulator driven by it."""

    def __init__(
        self,
        source_url: str | None = None,
        fetcher: RunFetcher = fetch_run,
        simulator: StageSimulator | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            source_url: Override for the launch source; None uses the configured one
            fetcher: Coroutine producing a RunResult for a source URL
            simulator: Stage simulator to drive, created from config if omitted
        """
        self.source_url = source_url
        self.fetcher = fetcher
        self.simulator = simulator or StageSimulator()
        self.current: RunResult | None = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def run_once(self) -> RunResult:
        """Fetch a fresh RunResult, publish it and restart the simulation."""
        result = await self.fetcher(self.source_url)
        self.current = result
        run_id = self.simulator.start(result)

        logger.bind(
            run_id=run_id,
            rows_in=result.metrics.rows_in,
            fallback_used=result.fallback_used,
        ).info("etl_run_completed")
        return result

    async def restart(self) -> RunResult | None:
        """
        Produce a new run from the same source.

        Returns:
            The new RunResult, whose run starts with an empty log; the previous
            one if the attempt failed; None if another restart was already in
            flight and this call was ignored
        """
        if self._busy:
            logger.debug("etl_restart_ignored")
            return None

        self._busy = True
        try:
            result = await self.run_once()
        except Exception as e:
            logger.bind(error=str(e)).error("etl_restart_failed")
            self.simulator.note(f"⚠️ Restart failed: {e}")
            return self.current
        finally:
            self._busy = False

        logger.bind(run_id=self.simulator.run_id).info("etl_restarted")
        return result

    def export_csv(self, columns: Sequence[str] = EXPORT_COLUMNS) -> str:
        """Serialize the current batch and note the export in the log."""
        records = self.current.launches if self.current else ()
        text = to_delimited_text(records, columns)
        self.simulator.note(f"📤 Exported {len(records)} rows to CSV")
        return text

    def find_launch(self, launch_id: str) -> LaunchRecord | None:
        """Look up a record of the current batch by id."""
        if self.current is None:
            return None
        return next((r for r in self.current.launches if r.id == launch_id), None)

    def to_delimited_text(
        self,
        records: Sequence[LaunchRecord],
        columns: Sequence[str] = EXPORT_COLUMNS,
    ) -> str:
        return to_delimited_text(records, columns)
