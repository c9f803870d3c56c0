"""Builders and collaborator doubles shared by the tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dep_resolution.config import CacheSettings
from dep_resolution.engine.catalog import ModuleMetadata
from dep_resolution.engine.fetcher import DirectoryArtifactFetcher
from dep_resolution.entities.modules import Dependency, ModuleCoordinate
from dep_resolution.entities.resolution import Artifact
from dep_resolution.workflows.models import ResolutionParams

REPO_ROOT = "https://repo.example.com/maven2"


def coord(organization: str, name: str) -> ModuleCoordinate:
    return ModuleCoordinate(organization=organization, name=name)


def jar(organization: str, name: str, version: str, classifier: str = "") -> Artifact:
    suffix = f"-{classifier}" if classifier else ""
    path = organization.replace(".", "/")
    return Artifact(
        url=f"{REPO_ROOT}/{path}/{name}/{version}/{name}-{version}{suffix}.jar",
        module=coord(organization, name),
        version=version,
        classifier=classifier,
    )


def dep(organization: str, name: str, version: str, **kwargs: Any) -> Dependency:
    return Dependency(module=coord(organization, name), version=version, **kwargs)


def metadata(
    organization: str,
    name: str,
    version: str,
    dependencies: tuple[Dependency, ...] = (),
    classifiers: tuple[str, ...] = ("",),
) -> ModuleMetadata:
    return ModuleMetadata(
        module=coord(organization, name),
        version=version,
        dependencies=dependencies,
        artifacts=tuple(jar(organization, name, version, c) for c in classifiers),
    )


def write_artifacts(root: Path, artifacts: list[Artifact]) -> None:
    """Create files where DirectoryArtifactFetcher looks for ``artifacts``."""
    fetcher = DirectoryArtifactFetcher(root)
    for artifact in artifacts:
        path = fetcher.local_path(artifact)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"PK")


def make_params(
    dependencies: list[tuple[str, Dependency]],
    **overrides: Any,
) -> ResolutionParams:
    values: dict[str, Any] = {
        "configuration_set": frozenset({"compile", "runtime", "test"}),
        "dependencies": tuple(dependencies),
        "fallback_dependencies": (),
        "repositories": (),
        "inter_project_dependencies": (),
        "platform_organization": "org.scala-lang",
        "platform_version": "2.13.12",
        "typelevel": False,
        "auto_platform_library": False,
        "maven_profiles": frozenset(),
        "max_iterations": 100,
        "cache": CacheSettings(location=Path("/tmp/dep-resolution-test-cache")),
        "cache_policies": CacheSettings().policies,
        "logger": logging.getLogger("tests"),
    }
    values.update(overrides)
    return ResolutionParams(**values)


class CountingEngine:
    """Resolver engine double that records calls and can return a fixed result."""

    def __init__(self, inner: Any = None, result: Any = None) -> None:
        self._inner = inner
        self._result = result
        self.calls: list[ResolutionParams] = []

    def resolve(self, params: ResolutionParams) -> Any:
        self.calls.append(params)
        if self._result is not None:
            return self._result
        return self._inner.resolve(params)


class CountingFetcher:
    """Artifact fetcher double counting invocations."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self.calls = 0

    def fetch(self, params: Any) -> Any:
        self.calls += 1
        return self._inner.fetch(params)
