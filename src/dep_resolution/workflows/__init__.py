"""Workflows package."""

from dep_resolution.workflows.failures import (
    resolution_exception,
    unresolved_warning_or_raise,
)
from dep_resolution.workflows.models import (
    ArtifactsParams,
    PipelineOutcome,
    PipelineStage,
    ResolutionParams,
    UpdateConfiguration,
    UpdateParams,
)
from dep_resolution.workflows.pipeline import DependencyResolution, ResolutionPipeline

__all__ = [
    "ArtifactsParams",
    "DependencyResolution",
    "PipelineOutcome",
    "PipelineStage",
    "ResolutionParams",
    "ResolutionPipeline",
    "UpdateConfiguration",
    "UpdateParams",
    "resolution_exception",
    "unresolved_warning_or_raise",
]
