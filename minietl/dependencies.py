from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from minietl.pipeline.controller import RunController


@lru_cache
def get_run_controller() -> RunController:
    """Get the process-wide run controller."""
    return RunController()


# Type alias for dependency injection
Controller = Annotated[RunController, Depends(get_run_controller)]
