"""Domain models for declared resolvers and engine-native repositories."""

from __future__ import annotations

from enum import StrEnum
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, SecretStr

from dep_resolution.entities.modules import Project  # noqa: TC001


class ResolverKind(StrEnum):
    """Resolver kinds the assembler knows how to convert."""

    MAVEN = "maven"
    IVY = "ivy"
    FILE = "file"
    URL = "url"


class RepositoryKind(StrEnum):
    """Engine-native repository layouts."""

    MAVEN = "maven"
    IVY = "ivy"
    INTER_PROJECT = "inter-project"


class Authentication(BaseModel):
    """Credentials attached to a repository."""

    model_config = ConfigDict(frozen=True)

    user: str
    password: SecretStr
    realm: str | None = None
    optional: bool = False


class Resolver(BaseModel):
    """A repository as declared in the build definition.

    ``kind`` is a free string so that resolver kinds unknown to this package
    can still be declared; they are skipped during assembly.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str
    root: str = ""
    ivy_patterns: tuple[str, ...] = ()
    artifact_patterns: tuple[str, ...] = ()
    m2_compatible: bool = False


class Repository(BaseModel):
    """Engine-native repository."""

    model_config = ConfigDict(frozen=True)

    kind: RepositoryKind
    name: str = ""
    root: str = ""
    ivy_patterns: tuple[str, ...] = ()
    artifact_patterns: tuple[str, ...] = ()
    authentication: Authentication | None = None
    with_checksums: bool = True
    with_signatures: bool = True
    with_artifacts: bool = True
    projects: tuple[Project, ...] = ()

    @property
    def host(self) -> str | None:
        """Host of the root URL, or of the first pattern for pattern-only repos."""
        candidates = [self.root, *self.ivy_patterns, *self.artifact_patterns]
        for candidate in candidates:
            if not candidate:
                continue
            host = urlparse(candidate).hostname
            if host:
                return host
        return None

    def with_authentication(self, authentication: Authentication) -> Repository:
        return self.model_copy(update={"authentication": authentication})
