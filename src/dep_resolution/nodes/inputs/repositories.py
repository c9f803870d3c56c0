"""Repository assembly: declared resolvers plus internal repositories."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from dep_resolution.entities.repositories import (
    Repository,
    RepositoryKind,
    ResolverKind,
)

if TYPE_CHECKING:
    from dep_resolution.entities.modules import Project
    from dep_resolution.entities.repositories import Authentication, Resolver

logger = logging.getLogger(__name__)

FAST_REPOSITORY_HOSTS = frozenset({"repo1.maven.org", "repo.maven.apache.org"})
SLOW_REPOSITORY_HOSTS = frozenset(
    {"repo.typesafe.com", "repo.scala-sbt.org", "scala.jfrog.io", "dl.bintray.com"}
)

DEFAULT_IVY_PATTERN = (
    "[organisation]/[module](/scala_[scalaVersion])(/sbt_[sbtVersion])"
    "/[revision]/[type]s/[artifact](-[classifier]).[ext]"
)

_PROPERTY_RE = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True)
class AssembledRepositories:
    """User repositories followed by internal ones.

    The engine is expected to consult the inter-project repository before
    the others for the coordinates it holds; the list order does not say so.
    """

    main: tuple[Repository, ...]
    internal: tuple[Repository, ...]

    @property
    def ordered(self) -> tuple[Repository, ...]:
        return self.main + self.internal


def _resolver_host(resolver: Resolver) -> str | None:
    for candidate in (resolver.root, *resolver.ivy_patterns, *resolver.artifact_patterns):
        host = urlparse(candidate).hostname if candidate else None
        if host:
            return host
    return None


def _is_fast(resolver: Resolver) -> bool:
    return _resolver_host(resolver) in FAST_REPOSITORY_HOSTS


def _is_slow(resolver: Resolver) -> bool:
    return _resolver_host(resolver) in SLOW_REPOSITORY_HOSTS


def reorder_resolvers(resolvers: Sequence[Resolver]) -> list[Resolver]:
    """Move slow repositories after the rest when a fast one is present.

    Relative order inside both groups is kept.
    """
    if not (any(_is_fast(r) for r in resolvers) and any(_is_slow(r) for r in resolvers)):
        return list(resolvers)
    slow = [r for r in resolvers if _is_slow(r)]
    other = [r for r in resolvers if not _is_slow(r)]
    return other + slow


def default_ivy_properties(user_home: Path) -> dict[str, str]:
    return {
        "user.home": str(user_home),
        "ivy.home": str(user_home / ".ivy2"),
    }


def substitute_properties(pattern: str, properties: Mapping[str, str]) -> str:
    """Expand ``${name}`` placeholders; unknown names are left untouched."""
    return _PROPERTY_RE.sub(lambda m: properties.get(m.group(1), m.group(0)), pattern)


def _with_trailing_slash(root: str) -> str:
    return root if root.endswith("/") else root + "/"


def _file_root(root: str) -> str:
    if urlparse(root).scheme:
        return root
    return Path(root).as_uri()


def to_repository(
    resolver: Resolver,
    properties: Mapping[str, str],
    authentication: Authentication | None = None,
    log: logging.Logger = logger,
) -> Repository | None:
    """Convert a declared resolver into an engine repository.

    Returns None, with a warning, for resolver kinds that cannot be used.
    """
    kind = resolver.kind
    root = substitute_properties(resolver.root, properties) if resolver.root else ""

    if kind == ResolverKind.MAVEN:
        return Repository(
            kind=RepositoryKind.MAVEN,
            name=resolver.name,
            root=_with_trailing_slash(root),
            authentication=authentication,
        )

    if kind in (ResolverKind.IVY, ResolverKind.URL, ResolverKind.FILE):
        if kind == ResolverKind.FILE:
            root = _file_root(root) if root else ""
            if resolver.m2_compatible:
                return Repository(
                    kind=RepositoryKind.MAVEN,
                    name=resolver.name,
                    root=_with_trailing_slash(root),
                    authentication=authentication,
                )
        ivy_patterns = tuple(
            substitute_properties(p, properties) for p in resolver.ivy_patterns
        )
        artifact_patterns = tuple(
            substitute_properties(p, properties) for p in resolver.artifact_patterns
        )
        if not ivy_patterns and not artifact_patterns:
            if not root:
                log.warning(
                    "Resolver %s has neither a root nor patterns, ignoring it",
                    resolver.name,
                )
                return None
            ivy_patterns = (_with_trailing_slash(root) + DEFAULT_IVY_PATTERN,)
        return Repository(
            kind=RepositoryKind.IVY,
            name=resolver.name,
            root=root,
            ivy_patterns=ivy_patterns,
            artifact_patterns=artifact_patterns or ivy_patterns,
            authentication=authentication,
        )

    log.warning("Unrecognized repository %s (kind %s), ignoring it", resolver.name, kind)
    return None


def with_authentication_by_host(
    repository: Repository,
    by_host: Mapping[str, Authentication],
) -> Repository:
    """Attach host credentials unless the repository already has some."""
    if repository.authentication is not None:
        return repository
    host = repository.host
    if host is None or host not in by_host:
        return repository
    return repository.with_authentication(by_host[host])


def global_plugin_patterns(base: Path) -> list[str]:
    """Metadata patterns of globally installed build plugins under ``base``."""
    root = base.as_uri()
    module_path = (
        "/resolution-cache/[organization]/[module](/scala_[scalaVersion])"
        "(/sbt_[sbtVersion])/[revision]/resolved.xml.[ext]"
    )
    return [
        f"{root}/plugins/target{module_path}",
        f"{root}/plugins/target(/scala-[scalaVersion])(/sbt-[sbtVersion]){module_path}",
    ]


def plugin_repositories(base: Path) -> list[Repository]:
    return [
        Repository(
            kind=RepositoryKind.IVY,
            name=f"global-plugins-{index}",
            ivy_patterns=(pattern,),
            with_checksums=False,
            with_signatures=False,
            with_artifacts=False,
        )
        for index, pattern in enumerate(global_plugin_patterns(base))
    ]


def inter_project_repository(projects: Sequence[Project]) -> Repository:
    return Repository(
        kind=RepositoryKind.INTER_PROJECT,
        name="inter-project",
        projects=tuple(projects),
        with_checksums=False,
        with_signatures=False,
    )


def _location(repository: Repository) -> tuple[str, str, tuple[str, ...], tuple[str, ...]]:
    return (
        repository.kind.value,
        repository.root,
        repository.ivy_patterns,
        repository.artifact_patterns,
    )


def deduplicate_repositories(
    repositories: Sequence[Repository],
    log: logging.Logger = logger,
) -> list[Repository]:
    """Drop repositories sharing a name or a location with an earlier one."""
    names: set[str] = set()
    locations: set[tuple[str, str, tuple[str, ...], tuple[str, ...]]] = set()
    unique: list[Repository] = []
    for repository in repositories:
        location = _location(repository)
        if (repository.name and repository.name in names) or location in locations:
            log.debug("Dropping duplicate repository %s", repository.name or repository.root)
            continue
        if repository.name:
            names.add(repository.name)
        locations.add(location)
        unique.append(repository)
    return unique


def assemble_repositories(
    resolvers: Sequence[Resolver],
    *,
    plugin_base: Path,
    properties: Mapping[str, str],
    authentication_by_repository_id: Mapping[str, Authentication],
    authentication_by_host: Mapping[str, Authentication],
    inter_project_dependencies: Sequence[Project] = (),
    log: logging.Logger = logger,
) -> AssembledRepositories:
    """Build the repository list handed to the resolver engine.

    Credentials are looked up by resolver name first; host credentials only
    fill in for repositories left without any.
    """
    main: list[Repository] = []
    for resolver in resolvers:
        repository = to_repository(
            resolver,
            properties,
            authentication_by_repository_id.get(resolver.name),
            log=log,
        )
        if repository is not None:
            main.append(with_authentication_by_host(repository, authentication_by_host))
    main = deduplicate_repositories(main, log=log)

    internal = [
        *plugin_repositories(plugin_base),
        inter_project_repository(inter_project_dependencies),
    ]
    log.debug(
        "Assembled %d main and %d internal repositories", len(main), len(internal)
    )
    return AssembledRepositories(main=tuple(main), internal=tuple(internal))
