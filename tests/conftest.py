"""
Pytest configuration and fixtures for MiniETL tests.

Provides:
- Launch record and RunResult factories
- A stage simulator with millisecond timings
- A run controller backed by a stub fetcher
- Test client for API testing
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from minietl.core.datetime_utils import utc_now
from minietl.dependencies import get_run_controller
from minietl.ingest.base import Acquisition, LaunchRecord
from minietl.ingest.fixtures import fallback_launches
from minietl.main import app
from minietl.pipeline.controller import RunController
from minietl.pipeline.metrics import build_run_result
from minietl.pipeline.stages import StageSimulator
from minietl.schemas.run import RunResult

FAST_STAGES = ("extract", "transform", "load")
FAST_DELAYS = (0.01, 0.02, 0.03, 0.04)


@pytest.fixture
def make_launch():
    """Factory for launch records."""

    def _make_launch(
        id: str | None = None,
        name: str = "Test Mission",
        date_utc: datetime | None = None,
        success: bool | None = True,
        upcoming: bool = False,
        rocket: str | None = "Falcon 9",
        launchpad: str | None = "LC-39A",
        **extra,
    ) -> LaunchRecord:
        return LaunchRecord(
            id=id or f"launch-{uuid.uuid4().hex[:8]}",
            name=name,
            date_utc=date_utc or datetime(2025, 1, 1, tzinfo=UTC),
            success=success,
            upcoming=upcoming,
            rocket=rocket,
            launchpad=launchpad,
            **extra,
        )

    return _make_launch


@pytest.fixture
def make_run_result():
    """Factory for RunResults built from a list of records."""

    def _make_run_result(
        records: list[LaunchRecord] | None = None,
        source_url: str = "https://api.spacexdata.com/v5/launches",
        fallback_used: bool = False,
    ) -> RunResult:
        return build_run_result(
            Acquisition(
                records=tuple(records if records is not None else fallback_launches()),
                source_url=source_url,
                fallback_used=fallback_used,
                fetched_at=utc_now(),
            )
        )

    return _make_run_result


@pytest.fixture
def simulator() -> StageSimulator:
    """Stage simulator with millisecond timings."""
    return StageSimulator(stages=FAST_STAGES, delays=FAST_DELAYS)


@pytest.fixture
def stub_fetcher(make_run_result):
    """Fetcher returning queued RunResults and recording each call."""

    class StubFetcher:
        def __init__(self) -> None:
            self.calls: list[str | None] = []
            self.results: list[RunResult] = []

        async def __call__(self, source_url: str | None = None) -> RunResult:
            self.calls.append(source_url)
            if self.results:
                return self.results.pop(0)
            return make_run_result()

    return StubFetcher()


@pytest.fixture
def controller(simulator, stub_fetcher) -> RunController:
    """Run controller with a stub fetcher and fast simulator."""
    return RunController(fetcher=stub_fetcher, simulator=simulator)


@pytest_asyncio.fixture
async def client(controller: RunController) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with controller override."""
    app.dependency_overrides[get_run_controller] = lambda: controller

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    controller.simulator.cancel()
