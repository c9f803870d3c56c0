"""Domain models for modules, dependencies and configurations."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TARGET_CONFIGURATION = "default(compile)"


def _as_attribute_pairs(value: Any) -> Any:
    """Accept a mapping for extra attributes and store it as sorted pairs."""
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), str(v)) for k, v in value.items()))
    return value


class CrossVersion(StrEnum):
    """How a module name is suffixed with the platform version."""

    DISABLED = "disabled"
    BINARY = "binary"
    FULL = "full"


class ModuleCoordinate(BaseModel):
    """Organization and name (plus extra attributes) of a module, without version."""

    model_config = ConfigDict(frozen=True)

    organization: str
    name: str
    attributes: tuple[tuple[str, str], ...] = ()

    @field_validator("attributes", mode="before")
    @classmethod
    def normalize_attributes(cls, v: Any) -> Any:
        """Store extra attributes as sorted pairs so coordinates stay hashable."""
        return _as_attribute_pairs(v)

    @property
    def key(self) -> str:
        return f"{self.organization}:{self.name}"

    def __str__(self) -> str:
        if not self.attributes:
            return self.key
        extra = ";".join(f"{k}={v}" for k, v in self.attributes)
        return f"{self.key};{extra}"


class Exclusion(BaseModel):
    """An (organization, name) pair removed from the transitive graph.

    ``*`` on either side matches anything.
    """

    model_config = ConfigDict(frozen=True)

    organization: str
    name: str

    def matches(self, module: ModuleCoordinate) -> bool:
        return self.organization in ("*", module.organization) and self.name in (
            "*",
            module.name,
        )


class Dependency(BaseModel):
    """An engine-facing dependency on a module at a version constraint."""

    model_config = ConfigDict(frozen=True)

    module: ModuleCoordinate
    version: str
    configuration: str = DEFAULT_TARGET_CONFIGURATION
    exclusions: frozenset[Exclusion] = Field(default_factory=frozenset)
    classifier: str = ""
    transitive: bool = True
    optional: bool = False

    def with_exclusions(self, extra: frozenset[Exclusion]) -> Dependency:
        """Return a copy whose exclusions are the union with ``extra``."""
        return self.model_copy(update={"exclusions": self.exclusions | extra})

    def excludes(self, module: ModuleCoordinate) -> bool:
        return any(excl.matches(module) for excl in self.exclusions)


# (configuration scope, dependency)
DependencyEntry = tuple[str, Dependency]


class ModuleID(BaseModel):
    """A dependency as declared by the build tool.

    ``configurations`` is a mapping such as ``"compile"``,
    ``"test->default"`` or ``"compile,runtime->runtime;test"``.
    """

    model_config = ConfigDict(frozen=True)

    organization: str
    name: str
    revision: str
    configurations: str | None = None
    cross_version: CrossVersion = CrossVersion.DISABLED
    exclusions: tuple[Exclusion, ...] = ()
    extra_attributes: tuple[tuple[str, str], ...] = ()
    classifier: str = ""
    is_transitive: bool = True

    @field_validator("extra_attributes", mode="before")
    @classmethod
    def normalize_extra_attributes(cls, v: Any) -> Any:
        return _as_attribute_pairs(v)

    def with_extra_attributes(self, attributes: Mapping[str, str]) -> ModuleID:
        return self.model_copy(
            update={"extra_attributes": _as_attribute_pairs(attributes)}
        )

    @property
    def coordinate(self) -> ModuleCoordinate:
        return ModuleCoordinate(
            organization=self.organization,
            name=self.name,
            attributes=self.extra_attributes,
        )

    def __str__(self) -> str:
        return f"{self.organization}:{self.name}:{self.revision}"


class Configuration(BaseModel):
    """A named dependency scope that may extend other scopes."""

    model_config = ConfigDict(frozen=True)

    name: str
    extends: tuple[str, ...] = ()
    description: str = ""
    transitive: bool = True
    visible: bool = True


DEFAULT_CONFIGURATIONS: tuple[Configuration, ...] = (
    Configuration(name="compile"),
    Configuration(name="runtime", extends=("compile",)),
    Configuration(name="test", extends=("runtime",)),
    Configuration(name="provided"),
    Configuration(name="optional"),
)


class PlatformInfo(BaseModel):
    """Platform/library version triple declared by a module."""

    model_config = ConfigDict(frozen=True)

    organization: str
    full_version: str
    binary_version: str


class ModuleSettings(BaseModel):
    """Raw module descriptor content handed over by the build tool."""

    model_config = ConfigDict(frozen=True)

    module: ModuleID
    dependencies: tuple[ModuleID, ...] = ()
    configurations: tuple[Configuration, ...] = DEFAULT_CONFIGURATIONS
    platform_info: PlatformInfo | None = None


class Project(BaseModel):
    """Another module of the same multi-module build."""

    model_config = ConfigDict(frozen=True)

    module: ModuleCoordinate
    version: str
    configurations: tuple[Configuration, ...] = DEFAULT_CONFIGURATIONS
    dependencies: tuple[tuple[str, Dependency], ...] = ()


class FallbackDependency(BaseModel):
    """A module whose artifact comes from a fixed URL when no repository has it."""

    model_config = ConfigDict(frozen=True)

    module: ModuleCoordinate
    version: str
    url: str
    changing: bool = False
