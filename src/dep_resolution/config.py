"""Resolution configuration and process-wide cache defaults."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from dep_resolution.entities.modules import FallbackDependency, Project  # noqa: TC001
from dep_resolution.entities.repositories import Authentication, Resolver  # noqa: TC001

DEFAULT_PLATFORM_ORGANIZATION = "org.scala-lang"
DEFAULT_TOOLCHAIN_VERSION = "2.12.18"
DEFAULT_TOOL_BINARY_VERSION = "1.0"


class CachePolicy(StrEnum):
    """How the engine may use its on-disk cache."""

    LOCAL_ONLY = "local-only"
    LOCAL_UPDATE_CHANGING = "local-update-changing"
    LOCAL_UPDATE = "local-update"
    FETCH_MISSING = "fetch-missing"
    UPDATE = "update"


class CacheSettings(BaseModel):
    """Cache location, checksum and TTL defaults handed to the engine."""

    model_config = ConfigDict(frozen=True)

    location: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "dep-resolution" / "v1"
    )
    checksums: tuple[str | None, ...] = Field(default=("SHA-1", None))
    policies: tuple[CachePolicy, ...] = Field(
        default=(CachePolicy.LOCAL_UPDATE_CHANGING, CachePolicy.FETCH_MISSING)
    )
    ttl_seconds: float | None = Field(default=24 * 60 * 60)


class ResolutionConfig(BaseModel):
    """Everything a resolution call needs beyond the module descriptor.

    Built once by the caller and passed down. Defaults are supplied here at
    construction time so requests stay reproducible.
    """

    model_config = ConfigDict(frozen=True)

    resolvers: tuple[Resolver, ...] = ()
    reorder_resolvers: bool = True
    exclude_dependencies: tuple[tuple[str, str], ...] = ()

    platform_organization: str | None = None
    platform_version: str | None = None
    toolchain_version: str = Field(default=DEFAULT_TOOLCHAIN_VERSION)
    auto_platform_library: bool = True

    has_classifiers: bool = False
    classifiers: tuple[str, ...] = ()

    authentication_by_repository_id: tuple[tuple[str, Authentication], ...] = ()
    authentication_by_host: tuple[tuple[str, Authentication], ...] = ()

    inter_project_dependencies: tuple[Project, ...] = ()
    fallback_dependencies: tuple[FallbackDependency, ...] = ()
    maven_profiles: tuple[str, ...] = ()

    parallel_downloads: int = Field(default=6, ge=1)
    max_iterations: int = Field(default=100, ge=1)

    # Jars of the platform library the build tool itself runs on
    tool_platform_organization: str | None = None
    tool_platform_version: str | None = None
    tool_platform_jars: tuple[tuple[str, Path], ...] = ()
    tool_binary_version: str = Field(default=DEFAULT_TOOL_BINARY_VERSION)
    global_base: Path | None = None
    user_home: Path = Field(default_factory=Path.home)

    cache: CacheSettings = Field(default_factory=CacheSettings)


DEFAULT_CACHE_SETTINGS = CacheSettings()
