"""Entity models for the dep-resolution domain layer."""

from dep_resolution.entities.descriptors import (
    ForeignDescriptor,
    ModuleDescriptor,
    NativeDescriptor,
)
from dep_resolution.entities.errors import (
    ConflictingDependencies,
    EngineFailure,
    InvalidRepository,
    MaximumIterationReached,
    MetadataDownloadErrors,
    ResolutionError,
    ResolveException,
    SeveralErrors,
    UnrecognizedDescriptorError,
    UnresolvedWarning,
    UnresolvedWarningConfiguration,
    UnsatisfiableRule,
)
from dep_resolution.entities.modules import (
    Configuration,
    CrossVersion,
    Dependency,
    DependencyEntry,
    Exclusion,
    FallbackDependency,
    ModuleCoordinate,
    ModuleID,
    ModuleSettings,
    PlatformInfo,
    Project,
)
from dep_resolution.entities.report import (
    ArtifactReport,
    ConfigurationReport,
    ModuleReport,
    PlatformJarOverrides,
    UpdateReport,
    UpdateStats,
)
from dep_resolution.entities.repositories import (
    Authentication,
    Repository,
    RepositoryKind,
    Resolver,
    ResolverKind,
)
from dep_resolution.entities.resolution import (
    Artifact,
    FileError,
    FileErrorKind,
    Resolution,
    ResolvedModule,
)

__all__ = [
    "Artifact",
    "ArtifactReport",
    "Authentication",
    "Configuration",
    "ConfigurationReport",
    "ConflictingDependencies",
    "CrossVersion",
    "Dependency",
    "DependencyEntry",
    "EngineFailure",
    "Exclusion",
    "FallbackDependency",
    "FileError",
    "FileErrorKind",
    "ForeignDescriptor",
    "InvalidRepository",
    "MaximumIterationReached",
    "MetadataDownloadErrors",
    "ModuleCoordinate",
    "ModuleDescriptor",
    "ModuleID",
    "ModuleReport",
    "ModuleSettings",
    "NativeDescriptor",
    "PlatformInfo",
    "PlatformJarOverrides",
    "Project",
    "Repository",
    "RepositoryKind",
    "Resolution",
    "ResolutionError",
    "ResolveException",
    "ResolvedModule",
    "Resolver",
    "ResolverKind",
    "SeveralErrors",
    "UnrecognizedDescriptorError",
    "UnresolvedWarning",
    "UnresolvedWarningConfiguration",
    "UnsatisfiableRule",
    "UpdateReport",
    "UpdateStats",
]
