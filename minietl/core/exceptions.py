"""Error taxonomy for the mini-ETL pipeline.

Acquisition errors are never raised past ``acquire()``: they only label the
reason a fixture batch was substituted. ``RestartFailure`` is raised by the
remote control endpoint client and absorbed by the run controller.
"""


class MiniETLError(Exception):
    """Base class for pipeline errors."""


class SourceUnavailable(MiniETLError):
    """Transport failure or non-success status from the launch source."""


class MalformedPayload(MiniETLError):
    """Response body is not a well-formed sequence of launch records."""


class RestartFailure(MiniETLError):
    """The restart control endpoint failed or returned a non-2xx status."""


class PipelineConfigError(MiniETLError):
    """Invalid stage or timing configuration."""
