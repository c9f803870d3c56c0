"""Default report builder: group resolved modules and artifacts per configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import networkx as nx

from dep_resolution.entities.modules import ModuleID
from dep_resolution.entities.report import (
    ArtifactReport,
    ConfigurationReport,
    ModuleReport,
    UpdateReport,
)
from dep_resolution.entities.resolution import FileError, FileErrorKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dep_resolution.entities.modules import Dependency, DependencyEntry
    from dep_resolution.entities.resolution import Artifact, Resolution, ResolvedModule
    from dep_resolution.workflows.models import UpdateParams

logger = logging.getLogger(__name__)

COMPILE_CONFIGURATION = "compile"


def implicit_roots(
    resolution: Resolution,
    dependencies: Sequence[DependencyEntry],
    configuration_set: frozenset[str],
) -> list[Dependency]:
    """Roots the engine added on its own, such as the platform library.

    They belong to the ``compile`` closure, or to every configuration of a
    set without ``compile``.
    """
    declared = {
        dep.module.key for scope, dep in dependencies if scope in configuration_set
    }
    return [
        dep for dep in resolution.root_dependencies if dep.module.key not in declared
    ]


def reachable_modules(
    resolution: Resolution,
    root_keys: set[str],
    intransitive_keys: set[str] | None = None,
) -> set[str]:
    """Module keys reachable from ``root_keys`` in the resolved graph.

    Roots listed in ``intransitive_keys`` contribute only themselves.
    """
    graph = resolution.dependency_graph()
    reachable: set[str] = set()
    for key in root_keys:
        if key not in graph:
            continue
        reachable.add(key)
        if intransitive_keys and key in intransitive_keys:
            continue
        descendants: set[str] = nx.descendants(graph, key)  # pyright: ignore[reportUnknownMemberType]
        reachable.update(descendants)
    return reachable


class DefaultReportBuilder:
    """Builds an ``UpdateReport`` keyed by configuration name."""

    def build(self, params: UpdateParams) -> UpdateReport:
        reports: dict[str, ConfigurationReport] = {}
        for configuration in params.configurations:
            reports[configuration.name] = self._configuration_report(
                configuration.name, params
            )
        return UpdateReport(configurations=reports)

    def _configuration_report(self, name: str, params: UpdateParams) -> ConfigurationReport:
        graph = params.configuration_graph
        conf_set = graph.set_for(name)
        resolution = params.resolutions.get(conf_set) if conf_set is not None else None
        if resolution is None:
            logger.debug("No resolution for configuration %s", name)
            return ConfigurationReport(configuration=name)

        closure = graph.closures.get(name, frozenset({name}))
        roots = [dep for scope, dep in params.dependencies if scope in closure]
        if COMPILE_CONFIGURATION in closure or COMPILE_CONFIGURATION not in conf_set:
            roots.extend(implicit_roots(resolution, params.dependencies, conf_set))
        root_keys = {dep.module.key for dep in roots}
        intransitive = {dep.module.key for dep in roots if not dep.transitive}
        # A module is intransitive only if every declaration of it is
        intransitive -= {dep.module.key for dep in roots if dep.transitive}

        keys = reachable_modules(resolution, root_keys, intransitive)
        modules = sorted(
            (m for m in resolution.modules if m.module.key in keys),
            key=lambda m: m.module.key,
        )
        return ConfigurationReport(
            configuration=name,
            modules=[self._module_report(m, params) for m in modules],
        )

    def _module_report(self, resolved: ResolvedModule, params: UpdateParams) -> ModuleReport:
        module_id = ModuleID(
            organization=resolved.module.organization,
            name=resolved.module.name,
            revision=resolved.version,
            extra_attributes=resolved.module.attributes,
        )
        override = params.platform_jar_overrides.override_for(
            resolved.module.organization, resolved.module.name, resolved.version
        )
        artifacts = [
            self._artifact_report(artifact, params, override)
            for artifact in resolved.selected_artifacts(params.classifiers)
        ]
        return ModuleReport(module=module_id, artifacts=artifacts)

    def _artifact_report(
        self,
        artifact: Artifact,
        params: UpdateParams,
        override: Path | None,
    ) -> ArtifactReport:
        if override is not None and not artifact.classifier:
            return ArtifactReport(artifact=artifact, file=override)

        fetched = params.artifacts.get(artifact)
        if isinstance(fetched, Path):
            return ArtifactReport(artifact=artifact, file=fetched)
        if isinstance(fetched, FileError):
            return ArtifactReport(artifact=artifact, error=fetched)
        return ArtifactReport(
            artifact=artifact,
            error=FileError(
                kind=FileErrorKind.OTHER,
                url=artifact.url,
                message="artifact was not fetched",
            ),
        )
