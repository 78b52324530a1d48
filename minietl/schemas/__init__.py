from minietl.schemas.run import Metrics, RunResult
from minietl.schemas.stage import StageSnapshot, StageState, StageStatus

__all__ = [
    "Metrics",
    "RunResult",
    "StageSnapshot",
    "StageState",
    "StageStatus",
]
