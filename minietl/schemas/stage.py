import enum

from pydantic import BaseModel, ConfigDict


class StageStatus(str, enum.Enum):
    """Status of one simulated pipeline stage."""

    PENDING = "pending"
    ACTIVE = "active"
    DONE = "done"


class StageState(BaseModel):
    """A named stage and its current status."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: StageStatus


class StageSnapshot(BaseModel):
    """Everything a renderer needs after one simulator transition."""

    model_config = ConfigDict(frozen=True)

    run_id: int
    stages: tuple[StageState, ...]
    log: tuple[str, ...]
    finished: bool

    @property
    def statuses(self) -> list[StageStatus]:
        return [stage.status for stage in self.stages]
