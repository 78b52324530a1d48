"""Pipeline state, restart control and export endpoints."""

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel

from minietl.core.datetime_utils import utc_now
from minietl.dependencies import Controller
from minietl.ingest.base import LaunchRecord
from minietl.schemas.run import RunResult
from minietl.schemas.stage import StageState

router = APIRouter()


class EtlStateResponse(BaseModel):
    """Current run plus the simulated stage progress."""

    run: RunResult
    stages: list[StageState]
    log: list[str]
    finished: bool


@router.get("/etl", response_model=EtlStateResponse)
async def get_etl_state(controller: Controller) -> EtlStateResponse:
    """
    Get the current pipeline state.

    Performs a first run if the server has not produced one yet.
    """
    run = controller.current or await controller.run_once()
    snapshot = controller.simulator.snapshot()
    return EtlStateResponse(
        run=run,
        stages=list(snapshot.stages),
        log=list(snapshot.log),
        finished=snapshot.finished,
    )


@router.get("/etl/restart", response_model=RunResult)
async def restart_etl(controller: Controller) -> RunResult:
    """
    Re-run the pipeline against the configured source.

    Returns 409 while another restart is still in flight and 502 when the
    attempt fails, even if an earlier run is still being served.
    """
    if controller.busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Restart already in progress",
        )

    run_id = controller.simulator.run_id
    result = await controller.restart()
    if result is None or controller.simulator.run_id == run_id:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Pipeline restart failed",
        )
    return result


@router.get("/etl/export")
async def export_etl(controller: Controller) -> Response:
    """Download the current batch as CSV."""
    if controller.current is None:
        await controller.run_once()

    filename = f"mini-etl-{int(utc_now().timestamp() * 1000)}.csv"
    return Response(
        content=controller.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/launches/{launch_id}", response_model=LaunchRecord)
async def get_launch(launch_id: str, controller: Controller) -> LaunchRecord:
    """Get one launch of the current batch."""
    if controller.current is None:
        await controller.run_once()

    launch = controller.find_launch(launch_id)
    if launch is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Launch not found",
        )
    return launch
