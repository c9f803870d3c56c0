"""Protocols of the external collaborators driven by the pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from dep_resolution.entities.errors import ResolutionError
    from dep_resolution.entities.report import UpdateReport
    from dep_resolution.entities.resolution import Artifact, FileError, Resolution
    from dep_resolution.workflows.models import (
        ArtifactsParams,
        ResolutionParams,
        UpdateParams,
    )


@runtime_checkable
class ResolverEngine(Protocol):
    """Resolves one configuration set.

    Failures are returned, not raised. Raising is reserved for faults the
    engine could not classify, which propagate to the caller.
    """

    def resolve(self, params: ResolutionParams) -> Resolution | ResolutionError: ...


@runtime_checkable
class ArtifactFetcher(Protocol):
    """Fetches the artifacts of resolved graphs, one result per artifact."""

    def fetch(self, params: ArtifactsParams) -> dict[Artifact, Path | FileError]: ...


@runtime_checkable
class ReportBuilder(Protocol):
    """Assembles the update report from resolutions and fetched artifacts."""

    def build(self, params: UpdateParams) -> UpdateReport: ...
