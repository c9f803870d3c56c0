"""In-memory resolver engine backed by a static module catalog."""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from dep_resolution.entities.errors import (
    MaximumIterationReached,
    MetadataDownloadErrors,
    ResolutionError,
)
from dep_resolution.entities.modules import Dependency, ModuleCoordinate
from dep_resolution.entities.resolution import Artifact, Resolution, ResolvedModule

if TYPE_CHECKING:
    from dep_resolution.entities.modules import Exclusion
    from dep_resolution.workflows.models import ResolutionParams

logger = logging.getLogger(__name__)

PLATFORM_LIBRARY_NAME = "scala-library"

_VERSION_SPLIT = re.compile(r"[.\-+_]")


def version_key(version: str) -> tuple[tuple[int, int | str], ...]:
    """Sort key for versions: numeric parts compare numerically and rank
    above qualifiers, so ``1.0-M1 < 1.0.1 < 1.10``."""
    parts: list[tuple[int, int | str]] = []
    for part in _VERSION_SPLIT.split(version):
        if part.isdigit():
            parts.append((1, int(part)))
        elif part:
            parts.append((0, part))
    return tuple(parts)


class ModuleMetadata(BaseModel):
    """Catalog entry: one module version, its dependencies and artifacts."""

    model_config = ConfigDict(frozen=True)

    module: ModuleCoordinate
    version: str
    dependencies: tuple[Dependency, ...] = ()
    artifacts: tuple[Artifact, ...] = ()


class CatalogResolverEngine:
    """Resolves configuration sets against an in-memory catalog.

    Highest requested version wins. Inter-project modules are looked up
    before the catalog; fallback dependencies after it. Modules found
    nowhere are reported together as ``MetadataDownloadErrors``.
    """

    def __init__(self, catalog: Iterable[ModuleMetadata] = ()) -> None:
        self._catalog: dict[tuple[str, str], ModuleMetadata] = {}
        for metadata in catalog:
            self.add(metadata)

    def add(self, metadata: ModuleMetadata) -> None:
        self._catalog[(metadata.module.key, metadata.version)] = metadata

    def __len__(self) -> int:
        return len(self._catalog)

    def resolve(self, params: ResolutionParams) -> Resolution | ResolutionError:
        return self._resolve(params)

    def _lookup(
        self, module: ModuleCoordinate, version: str, params: ResolutionParams
    ) -> ModuleMetadata | None:
        for project in params.inter_project_dependencies:
            if project.module.key == module.key:
                return ModuleMetadata(
                    module=project.module,
                    version=project.version,
                    dependencies=tuple(dep for _, dep in project.dependencies),
                )
        metadata = self._catalog.get((module.key, version))
        if metadata is not None:
            return metadata
        for fallback in params.fallback_dependencies:
            if fallback.module.key == module.key and fallback.version == version:
                return ModuleMetadata(
                    module=fallback.module,
                    version=fallback.version,
                    artifacts=(
                        Artifact(
                            url=fallback.url,
                            module=fallback.module,
                            version=fallback.version,
                        ),
                    ),
                )
        return None

    def _roots(self, params: ResolutionParams) -> list[Dependency]:
        roots = [dep for _, dep in params.dependencies]
        if params.auto_platform_library:
            platform = ModuleCoordinate(
                organization=params.platform_organization,
                name=PLATFORM_LIBRARY_NAME,
            )
            if not any(dep.module.key == platform.key for dep in roots):
                roots.append(Dependency(module=platform, version=params.platform_version))
        return roots

    def _traverse(
        self,
        roots: list[Dependency],
        selected: dict[str, str],
        params: ResolutionParams,
    ) -> tuple[dict[str, set[str]], dict[str, ModuleCoordinate]]:
        """Walk the graph under the current selection, collecting requested versions."""
        requested: dict[str, set[str]] = {}
        coordinates: dict[str, ModuleCoordinate] = {}
        queue: deque[tuple[Dependency, frozenset[Exclusion]]] = deque(
            (dep, dep.exclusions) for dep in roots
        )
        seen: set[tuple[str, str, frozenset[Exclusion]]] = set()

        while queue:
            dep, exclusions = queue.popleft()
            key = dep.module.key
            requested.setdefault(key, set()).add(dep.version)
            coordinates.setdefault(key, dep.module)
            version = selected.get(key, dep.version)
            state = (key, version, exclusions)
            if state in seen or not dep.transitive:
                continue
            seen.add(state)

            metadata = self._lookup(dep.module, version, params)
            if metadata is None:
                continue
            for child in metadata.dependencies:
                if child.optional or any(e.matches(child.module) for e in exclusions):
                    continue
                queue.append((child, exclusions | child.exclusions))
        return requested, coordinates

    def _resolve(self, params: ResolutionParams) -> Resolution | ResolutionError:
        roots = self._roots(params)
        selected: dict[str, str] = {}
        coordinates: dict[str, ModuleCoordinate] = {}

        for iteration in range(1, params.max_iterations + 1):
            requested, coordinates = self._traverse(roots, selected, params)
            candidate = {
                key: max(versions, key=version_key) for key, versions in requested.items()
            }
            if candidate == selected:
                params.logger.debug(
                    "Configuration set %s converged after %d iteration(s)",
                    ", ".join(sorted(params.configuration_set)),
                    iteration,
                )
                break
            selected = candidate
        else:
            return MaximumIterationReached(params.max_iterations)

        repository_names = (
            ", ".join(r.name for r in params.repositories if r.name) or "no repository"
        )
        modules: list[ResolvedModule] = []
        missing: list[tuple[tuple[ModuleCoordinate, str], list[str]]] = []
        for key in sorted(selected):
            version = selected[key]
            coordinate = coordinates[key]
            metadata = self._lookup(coordinate, version, params)
            if metadata is None:
                message = f"{coordinate}:{version}: not found in {repository_names}"
                missing.append(((coordinate, version), [message]))
                continue
            modules.append(
                ResolvedModule(
                    module=coordinate,
                    version=metadata.version,
                    dependencies=tuple(d for d in metadata.dependencies if not d.optional),
                    artifacts=metadata.artifacts,
                )
            )

        if missing:
            return MetadataDownloadErrors(missing)
        return Resolution(root_dependencies=tuple(roots), modules=tuple(modules))
