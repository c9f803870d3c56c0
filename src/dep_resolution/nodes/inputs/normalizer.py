"""Normalize a module descriptor and configuration into a resolution request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dep_resolution.config import DEFAULT_PLATFORM_ORGANIZATION
from dep_resolution.entities.descriptors import ForeignDescriptor, NativeDescriptor
from dep_resolution.entities.errors import UnrecognizedDescriptorError
from dep_resolution.entities.modules import Exclusion, ModuleSettings
from dep_resolution.entities.report import PlatformJarOverrides
from dep_resolution.nodes.inputs.config_graph import (
    ConfigurationGraph,
    build_configuration_graph,
    flatten_dependencies,
)
from dep_resolution.nodes.inputs.repositories import (
    AssembledRepositories,
    assemble_repositories,
    default_ivy_properties,
    reorder_resolvers,
)

if TYPE_CHECKING:
    from dep_resolution.config import CacheSettings, ResolutionConfig
    from dep_resolution.entities.modules import (
        Configuration,
        DependencyEntry,
        FallbackDependency,
        ModuleID,
        Project,
    )

logger = logging.getLogger(__name__)

TYPELEVEL_ORGANIZATION = "org.typelevel"


@dataclass(frozen=True)
class ResolutionRequest:
    """Canonical, immutable input of one resolution call."""

    module: ModuleID
    dependencies: tuple[DependencyEntry, ...]
    configurations: tuple[Configuration, ...]
    configuration_graph: ConfigurationGraph
    platform_organization: str
    platform_version: str
    binary_version: str
    exclusions: frozenset[Exclusion]
    classifiers: frozenset[str] | None
    repositories: AssembledRepositories
    fallback_dependencies: tuple[FallbackDependency, ...]
    inter_project_dependencies: tuple[Project, ...]
    maven_profiles: frozenset[str]
    typelevel: bool
    auto_platform_library: bool
    parallel_downloads: int
    max_iterations: int
    cache: CacheSettings
    platform_jar_overrides: PlatformJarOverrides


def module_settings(descriptor: object) -> ModuleSettings:
    """Extract module settings from a descriptor, failing on unknown shapes."""
    if isinstance(descriptor, NativeDescriptor):
        return descriptor.settings
    if isinstance(descriptor, ForeignDescriptor):
        if isinstance(descriptor.settings, ModuleSettings):
            return descriptor.settings
        raise UnrecognizedDescriptorError(
            f"unrecognized module settings: {descriptor.settings!r}"
        )
    raise UnrecognizedDescriptorError(
        f"unrecognized module descriptor type: {descriptor!r}"
    )


def binary_version_of(full_version: str) -> str:
    """First two dot-separated components of a version."""
    return ".".join(full_version.split(".")[:2])


def global_exclusions(config: ResolutionConfig) -> frozenset[Exclusion]:
    return frozenset(
        Exclusion(organization=org, name=name) for org, name in config.exclude_dependencies
    )


def normalize(
    descriptor: object,
    config: ResolutionConfig,
    log: logging.Logger = logger,
) -> ResolutionRequest:
    """Build the resolution request for ``descriptor`` under ``config``."""
    settings = module_settings(descriptor)
    info = settings.platform_info

    organization = (
        config.platform_organization
        or (info.organization if info else None)
        or DEFAULT_PLATFORM_ORGANIZATION
    )
    version = (
        config.platform_version
        or (info.full_version if info else None)
        or config.toolchain_version
    )
    binary_version = info.binary_version if info else binary_version_of(version)

    exclusions = global_exclusions(config)
    dependencies = flatten_dependencies(
        settings.dependencies, version, binary_version, exclusions
    )

    classifiers = frozenset(config.classifiers) if config.has_classifiers else None

    resolvers = (
        reorder_resolvers(config.resolvers)
        if config.reorder_resolvers
        else list(config.resolvers)
    )
    plugin_base = config.global_base or (
        config.user_home / ".dep-resolution" / config.tool_binary_version
    )
    repositories = assemble_repositories(
        resolvers,
        plugin_base=plugin_base,
        properties=default_ivy_properties(config.user_home),
        authentication_by_repository_id=dict(config.authentication_by_repository_id),
        authentication_by_host=dict(config.authentication_by_host),
        inter_project_dependencies=config.inter_project_dependencies,
        log=log,
    )

    overrides = PlatformJarOverrides(
        organization=config.tool_platform_organization or DEFAULT_PLATFORM_ORGANIZATION,
        version=config.tool_platform_version or version,
        jars=dict(config.tool_platform_jars),
    )

    log.debug(
        "Normalized %s: %d dependencies, platform %s:%s (%s)",
        settings.module,
        len(dependencies),
        organization,
        version,
        binary_version,
    )

    return ResolutionRequest(
        module=settings.module,
        dependencies=tuple(dependencies),
        configurations=tuple(settings.configurations),
        configuration_graph=build_configuration_graph(settings.configurations),
        platform_organization=organization,
        platform_version=version,
        binary_version=binary_version,
        exclusions=exclusions,
        classifiers=classifiers,
        repositories=repositories,
        fallback_dependencies=tuple(config.fallback_dependencies),
        inter_project_dependencies=tuple(config.inter_project_dependencies),
        maven_profiles=frozenset(config.maven_profiles),
        typelevel=organization == TYPELEVEL_ORGANIZATION,
        auto_platform_library=config.auto_platform_library,
        parallel_downloads=config.parallel_downloads,
        max_iterations=config.max_iterations,
        cache=config.cache,
        platform_jar_overrides=overrides,
    )
