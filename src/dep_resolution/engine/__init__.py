"""Resolver engine and artifact fetcher collaborators."""

from dep_resolution.engine.catalog import (
    CatalogResolverEngine,
    ModuleMetadata,
    version_key,
)
from dep_resolution.engine.fetcher import DirectoryArtifactFetcher
from dep_resolution.engine.protocols import (
    ArtifactFetcher,
    ReportBuilder,
    ResolverEngine,
)

__all__ = [
    "ArtifactFetcher",
    "CatalogResolverEngine",
    "DirectoryArtifactFetcher",
    "ModuleMetadata",
    "ReportBuilder",
    "ResolverEngine",
    "version_key",
]
