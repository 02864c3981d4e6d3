"""Request-handling pipeline built from ordered stages."""

from sapoci_connect.pipeline.pipeline import Pipeline
from sapoci_connect.pipeline.stages import (
    DefaultHeadersStage,
    Handler,
    LoggingStage,
    Stage,
)


__all__ = [
    "DefaultHeadersStage",
    "Handler",
    "LoggingStage",
    "Pipeline",
    "Stage",
]
