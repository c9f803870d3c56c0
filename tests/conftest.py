"""Shared test fixtures for dep-resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
from helpers import REPO_ROOT, dep, metadata, write_artifacts

from dep_resolution.config import ResolutionConfig
from dep_resolution.engine.catalog import CatalogResolverEngine, ModuleMetadata
from dep_resolution.entities.modules import ModuleID, ModuleSettings, PlatformInfo
from dep_resolution.entities.repositories import Resolver


@pytest.fixture
def catalog() -> list[ModuleMetadata]:
    """A small catalog: web -> core -> util, web -> util 1.1, plus a test kit."""
    return [
        metadata(
            "org.example",
            "core",
            "1.0",
            dependencies=(dep("org.example", "util", "1.0"),),
            classifiers=("", "sources"),
        ),
        metadata("org.example", "util", "1.0"),
        metadata("org.example", "util", "1.1"),
        metadata(
            "org.example",
            "web",
            "2.0",
            dependencies=(
                dep("org.example", "core", "1.0"),
                dep("org.example", "util", "1.1"),
            ),
        ),
        metadata("org.example", "testkit", "0.5"),
        metadata("org.scala-lang", "scala-library", "2.13.12"),
    ]


@pytest.fixture
def engine(catalog: list[ModuleMetadata]) -> CatalogResolverEngine:
    return CatalogResolverEngine(catalog)


@pytest.fixture
def artifact_root(tmp_path: Path, catalog: list[ModuleMetadata]) -> Path:
    """Directory holding every catalog artifact."""
    root = tmp_path / "artifacts"
    write_artifacts(root, [a for m in catalog for a in m.artifacts])
    return root


@pytest.fixture
def config(tmp_path: Path) -> ResolutionConfig:
    return ResolutionConfig(
        resolvers=(Resolver(name="central", kind="maven", root=REPO_ROOT),),
        auto_platform_library=False,
        user_home=tmp_path / "home",
    )


@pytest.fixture
def settings() -> ModuleSettings:
    """Application depending on core (compile) and testkit (test)."""
    return ModuleSettings(
        module=ModuleID(organization="com.acme", name="app", revision="0.1.0"),
        dependencies=(
            ModuleID(organization="org.example", name="core", revision="1.0"),
            ModuleID(
                organization="org.example",
                name="testkit",
                revision="0.5",
                configurations="test",
            ),
        ),
        platform_info=PlatformInfo(
            organization="org.scala-lang",
            full_version="2.13.12",
            binary_version="2.13",
        ),
    )
