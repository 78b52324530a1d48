"""
Simulated Extract -> Transform -> Load progress.

The simulator does no real work. Each run arms one loop timer per transition:
step ``k`` marks stages before ``k`` done, stage ``k`` active and appends its
log line; the final step marks every stage done. Starting a new run cancels
the previous run's timers, and every timer carries the run id it was armed
for so a callback from a superseded run never touches the state.
"""

import asyncio
from collections.abc import Callable, Sequence
from urllib.parse import urlparse

from minietl.config import get_config
from minietl.core.exceptions import PipelineConfigError
from minietl.core.logging import get_logger
from minietl.schemas.run import RunResult
from minietl.schemas.stage import StageSnapshot, StageState, StageStatus

logger = get_logger(__name__)

Listener = Callable[[StageSnapshot], None]


def source_label(result: RunResult) -> str:
    """Short provenance label: the source hostname, or demo data."""
    if result.fallback_used:
        return "demo data"
    return urlparse(result.source_url).hostname or result.source_url


def stage_line(stage: str, result: RunResult) -> str:
    """Log line emitted when ``stage`` becomes active."""
    metrics = result.metrics
    if stage == "extract":
        return f"Extract ▸ Fetched {metrics.rows_in} launches ({source_label(result)})"
    if stage == "transform":
        return (
            f"Transform ▸ Kept {metrics.rows_out} successful missions, "
            f"removed {metrics.dedup_removed}"
        )
    if stage == "load":
        return f"Load ▸ Data ready. Last mission: {metrics.last_mission}"
    return f"{stage.capitalize()} ▸ Done"


class StageSimulator:
    """Cancellable timer-driven state machine over a fixed list of stages."""

    def __init__(
        self,
        stages: Sequence[str] | None = None,
        delays: Sequence[float] | None = None,
    ) -> None:
        """
        Initialize the simulator.

        Args:
            stages: Ordered stage names, defaults to ``pipeline.stages``
            delays: Seconds from run start to each transition, one per stage
                plus the terminal one; defaults to ``pipeline.timings_ms``
        """
        if stages is None or delays is None:
            pipeline = get_config().pipeline
            stages = pipeline.stages if stages is None else stages
            delays = pipeline.delays if delays is None else delays

        if not stages:
            raise PipelineConfigError("at least one stage is required")
        if len(delays) != len(stages) + 1:
            raise PipelineConfigError(f"expected {len(stages) + 1} delays, got {len(delays)}")
        if any(b <= a for a, b in zip(delays, delays[1:])):
            raise PipelineConfigError("delays must be strictly increasing")

        self.stages = tuple(stages)
        self.delays = tuple(delays)

        self._run_id = 0
        self._handles: list[asyncio.TimerHandle] = []
        self._applied = 0
        self._statuses = self._initial_statuses()
        self._log: list[str] = []
        self._listeners: list[Listener] = []
        self._finished = asyncio.Event()

    @property
    def run_id(self) -> int:
        return self._run_id

    @property
    def pending_transitions(self) -> int:
        """Number of armed timers that have not fired yet."""
        if not self._handles:
            return 0
        return len(self.delays) - self._applied

    def snapshot(self) -> StageSnapshot:
        """Immutable view of the current state."""
        return StageSnapshot(
            run_id=self._run_id,
            stages=tuple(
                StageState(name=name, status=status)
                for name, status in zip(self.stages, self._statuses)
            ),
            log=tuple(self._log),
            finished=self._finished.is_set(),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self, result: RunResult) -> int:
        """
        Reset to the initial state and arm the transitions for ``result``.

        Must be called from a running event loop.

        Returns:
            The id of the new run
        """
        self.cancel()

        self._run_id += 1
        self._statuses = self._initial_statuses()
        self._log = []
        self._applied = 0
        self._finished.clear()

        lines = [stage_line(stage, result) for stage in self.stages]
        loop = asyncio.get_running_loop()
        for step, delay in enumerate(self.delays):
            handle = loop.call_later(delay, self._advance, self._run_id, step, lines)
            self._handles.append(handle)

        logger.bind(run_id=self._run_id, stages=len(self.stages)).debug("stage_run_started")
        self._publish()
        return self._run_id

    def cancel(self) -> None:
        """Cancel every outstanding transition of the current run."""
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    def note(self, line: str) -> None:
        """Append a line to the current run's log."""
        self._log.append(line)
        self._publish()

    async def wait_finished(self) -> StageSnapshot:
        """Wait until the current run reaches its terminal state."""
        await self._finished.wait()
        return self.snapshot()

    def _initial_statuses(self) -> list[StageStatus]:
        return [StageStatus.ACTIVE] + [StageStatus.PENDING] * (len(self.stages) - 1)

    @staticmethod
    def _status_at(index: int, step: int) -> StageStatus:
        if index < step:
            return StageStatus.DONE
        if index == step:
            return StageStatus.ACTIVE
        return StageStatus.PENDING

    def _advance(self, run_id: int, step: int, lines: list[str]) -> None:
        if run_id != self._run_id:
            return

        self._applied += 1
        if step < len(self.stages):
            self._statuses = [self._status_at(i, step) for i in range(len(self.stages))]
            self._log.append(lines[step])
        else:
            self._statuses = [StageStatus.DONE] * len(self.stages)
            self._handles.clear()
            self._finished.set()
            logger.bind(run_id=run_id).debug("stage_run_finished")

        self._publish()

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.bind(run_id=snapshot.run_id, error=str(e)).error("stage_listener_error")
