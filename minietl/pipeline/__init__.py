from minietl.pipeline.controller import RunController, fetch_run
from minietl.pipeline.export import EXPORT_COLUMNS, to_delimited_text
from minietl.pipeline.metrics import build_run_result, compute_metrics
from minietl.pipeline.remote import RemoteRunSource
from minietl.pipeline.stages import StageSimulator

__all__ = [
    "EXPORT_COLUMNS",
    "RemoteRunSource",
    "RunController",
    "StageSimulator",
    "build_run_result",
    "compute_metrics",
    "fetch_run",
    "to_delimited_text",
]
