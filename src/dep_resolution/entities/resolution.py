"""Resolved-graph handle and artifact models produced by the engine."""

from __future__ import annotations

from enum import StrEnum

import networkx as nx
from pydantic import BaseModel, ConfigDict

from dep_resolution.entities.modules import Dependency, ModuleCoordinate  # noqa: TC001


class Artifact(BaseModel):
    """A downloadable file attached to a resolved module."""

    model_config = ConfigDict(frozen=True)

    url: str
    module: ModuleCoordinate
    version: str
    type: str = "jar"
    classifier: str = ""
    extension: str = "jar"
    optional: bool = False


class ResolvedModule(BaseModel):
    """One module of a resolved graph, at its selected version."""

    model_config = ConfigDict(frozen=True)

    module: ModuleCoordinate
    version: str
    dependencies: tuple[Dependency, ...] = ()
    artifacts: tuple[Artifact, ...] = ()

    def selected_artifacts(self, classifiers: frozenset[str] | None) -> list[Artifact]:
        """Artifacts matching the classifier selection.

        ``None`` selects the default (empty) classifier only.
        """
        if classifiers is None:
            return [a for a in self.artifacts if not a.classifier]
        return [a for a in self.artifacts if a.classifier in classifiers]


class Resolution(BaseModel):
    """Resolved graph for one configuration set.

    The orchestrator treats it as opaque; the fetcher and report builder
    read it.
    """

    model_config = ConfigDict(frozen=True)

    root_dependencies: tuple[Dependency, ...] = ()
    modules: tuple[ResolvedModule, ...] = ()

    def module(self, coordinate: ModuleCoordinate) -> ResolvedModule | None:
        for resolved in self.modules:
            if resolved.module.key == coordinate.key:
                return resolved
        return None

    def artifacts(self, classifiers: frozenset[str] | None) -> list[Artifact]:
        seen: set[Artifact] = set()
        ordered: list[Artifact] = []
        for resolved in self.modules:
            for artifact in resolved.selected_artifacts(classifiers):
                if artifact not in seen:
                    seen.add(artifact)
                    ordered.append(artifact)
        return ordered

    def dependency_graph(self) -> nx.DiGraph[str]:
        """Directed graph of module keys, edges pointing at dependencies."""
        graph: nx.DiGraph[str] = nx.DiGraph()
        for resolved in self.modules:
            graph.add_node(resolved.module.key)
        for resolved in self.modules:
            for dep in resolved.dependencies:
                if dep.module.key in graph:
                    graph.add_edge(resolved.module.key, dep.module.key)
        return graph


class FileErrorKind(StrEnum):
    """Why an artifact could not be fetched."""

    NOT_FOUND = "not_found"
    DOWNLOAD_ERROR = "download_error"
    WRONG_CHECKSUM = "wrong_checksum"
    UNAUTHORIZED = "unauthorized"
    LOCKED = "locked"
    OTHER = "other"


class FileError(BaseModel):
    """Per-artifact fetch failure, carried as data in the report."""

    model_config = ConfigDict(frozen=True)

    kind: FileErrorKind
    url: str
    message: str = ""

    def describe(self) -> str:
        return f"{self.kind.value}: {self.url}" + (
            f" ({self.message})" if self.message else ""
        )
