"""
MiniETL CLI - Command line interface for the demo pipeline.

Usage:
    minietl --help                 Show all commands
    minietl run                    Fetch launches and animate the stages
    minietl export -o out.csv      Export the current batch as CSV
    minietl restart --remote URL   Trigger a restart on a running server
    minietl serve                  Start the HTTP API
"""

import asyncio
from pathlib import Path

import typer

from minietl.schemas.run import RunResult
from minietl.schemas.stage import StageSnapshot, StageStatus

app = typer.Typer(
    name="minietl",
    help="MiniETL CLI - demo Extract -> Transform -> Load pipeline",
    no_args_is_help=True,
)

STATUS_ICONS = {
    StageStatus.PENDING: "·",
    StageStatus.ACTIVE: "▶",
    StageStatus.DONE: "✔",
}


# --- Printer helpers ---


def _print_success(message: str) -> None:
    """Print a success message."""
    typer.echo(f"  ✅ {message}")


def _print_warning(message: str) -> None:
    """Print a warning message."""
    typer.echo(f"  ⚠️ {message}")


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


def _print_metrics(result: RunResult) -> None:
    metrics = result.metrics
    source = "DEMO DATA" if result.fallback_used else "LIVE API"
    typer.echo(f"\nSource: {result.source_url} [{source}]")
    typer.echo(f"  Rows in (launches fetched): {metrics.rows_in}")
    typer.echo(f"  Rows out (successful):      {metrics.rows_out}")
    typer.echo(f"  Removed (failed):           {metrics.dedup_removed}")
    typer.echo(f"  Upcoming launches:          {metrics.upcoming}")
    typer.echo(f"  Last mission:               {metrics.last_mission}")


class SnapshotPrinter:
    """Echo stage transitions and new log lines as they are published."""

    def __init__(self) -> None:
        self._printed = 0
        self._run_id = 0

    def __call__(self, snapshot: StageSnapshot) -> None:
        if snapshot.run_id != self._run_id:
            self._run_id = snapshot.run_id
            self._printed = 0

        pills = "  ".join(
            f"{STATUS_ICONS[stage.status]} {stage.name.upper()}" for stage in snapshot.stages
        )
        typer.echo(f"[{pills}]")
        for line in snapshot.log[self._printed :]:
            typer.echo(f"    {line}")
        self._printed = len(snapshot.log)


async def _animate(controller, operation) -> RunResult | None:
    unsubscribe = controller.simulator.subscribe(SnapshotPrinter())
    try:
        result = await operation()
        if result is not None and controller.current is result:
            await controller.simulator.wait_finished()
        return result
    finally:
        unsubscribe()
        controller.simulator.cancel()


@app.command()
def run(
    url: str | None = typer.Option(None, "--url", "-u", help="Override the launch source URL"),
):
    """Fetch the latest launches and play the staged pipeline."""
    from minietl.core.logging import setup_logging
    from minietl.pipeline.controller import RunController

    setup_logging()
    controller = RunController(source_url=url)
    result = asyncio.run(_animate(controller, controller.run_once))

    _print_metrics(result)
    if result.fallback_used:
        _print_warning("Live source unavailable, demo data used")
    else:
        _print_success("Pipeline completed")


@app.command()
def export(
    output: Path | None = typer.Option(None, "--output", "-o", help="CSV file (stdout if omitted)"),
    url: str | None = typer.Option(None, "--url", "-u", help="Override the launch source URL"),
):
    """Fetch the latest launches and export them as CSV."""
    from minietl.core.logging import setup_logging
    from minietl.pipeline.controller import RunController

    setup_logging()
    controller = RunController(source_url=url)

    async def _export() -> str:
        await controller.run_once()
        try:
            return controller.export_csv()
        finally:
            controller.simulator.cancel()

    text = asyncio.run(_export())
    if output is None:
        typer.echo(text)
        return

    output.write_text(text + "\n", encoding="utf-8")
    _print_success(f"Exported {controller.current.metrics.rows_in} rows to {output}")


@app.command()
def restart(
    remote: str = typer.Option(..., "--remote", "-r", help="Base URL of a running MiniETL server"),
):
    """Trigger a pipeline restart on a running server and play the result."""
    from minietl.core.logging import setup_logging
    from minietl.pipeline.controller import RunController
    from minietl.pipeline.remote import RemoteRunSource

    setup_logging()
    controller = RunController(fetcher=RemoteRunSource(remote))
    result = asyncio.run(_animate(controller, controller.restart))

    if result is None:
        _print_error(f"Restart failed: {controller.simulator.snapshot().log[-1]}")
        raise typer.Exit(code=1)

    _print_metrics(result)
    _print_success("Pipeline restarted")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("minietl.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
