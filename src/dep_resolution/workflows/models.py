"""Stage parameter and result models for the resolution pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from dep_resolution.config import CachePolicy, CacheSettings
    from dep_resolution.entities.modules import (
        Configuration,
        DependencyEntry,
        FallbackDependency,
        Project,
    )
    from dep_resolution.entities.errors import ResolutionError
    from dep_resolution.entities.report import PlatformJarOverrides, UpdateReport
    from dep_resolution.entities.repositories import Repository
    from dep_resolution.entities.resolution import Artifact, FileError, Resolution
    from dep_resolution.nodes.inputs.config_graph import ConfigurationGraph


class PipelineStage(StrEnum):
    """States of one pipeline run."""

    START = "start"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UpdateConfiguration:
    """Per-call options of an update."""

    offline: bool = False


@dataclass(frozen=True)
class ResolutionParams:
    """Resolver engine input for one configuration set."""

    configuration_set: frozenset[str]
    dependencies: tuple[DependencyEntry, ...]
    fallback_dependencies: tuple[FallbackDependency, ...]
    repositories: tuple[Repository, ...]
    inter_project_dependencies: tuple[Project, ...]
    platform_organization: str
    platform_version: str
    typelevel: bool
    auto_platform_library: bool
    maven_profiles: frozenset[str]
    max_iterations: int
    cache: CacheSettings
    cache_policies: tuple[CachePolicy, ...]
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))


@dataclass(frozen=True)
class ArtifactsParams:
    """Artifact fetcher input covering every resolved configuration set."""

    resolutions: tuple[Resolution, ...]
    classifiers: frozenset[str] | None
    parallel_downloads: int
    cache: CacheSettings
    cache_policies: tuple[CachePolicy, ...]
    include_signatures: bool = False
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))


@dataclass(frozen=True)
class UpdateParams:
    """Report builder input."""

    dependencies: tuple[DependencyEntry, ...]
    configurations: tuple[Configuration, ...]
    configuration_graph: ConfigurationGraph
    resolutions: dict[frozenset[str], Resolution]
    artifacts: dict[Artifact, Path | FileError]
    classifiers: frozenset[str] | None
    platform_jar_overrides: PlatformJarOverrides


@dataclass
class PipelineOutcome:
    """Terminal state of a run: a report when done, the error when failed."""

    stage: PipelineStage
    report: UpdateReport | None = None
    error: ResolutionError | None = None
