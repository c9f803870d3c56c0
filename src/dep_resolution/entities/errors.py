"""Resolution error family, the recoverable warning, and contract errors.

Engine failures are ``ResolutionError`` instances returned as values from
``ResolverEngine.resolve``. Only ``MetadataDownloadErrors`` is recoverable;
every other variant is raised to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dep_resolution.entities.modules import ModuleCoordinate, ModuleID


class UnrecognizedDescriptorError(TypeError):
    """A module descriptor of a type this package cannot resolve."""


class ResolutionError(Exception):
    """Base class of every failure the resolver engine can report."""

    def exception(self) -> Exception:
        """The terminal exception to raise for this error."""
        return self


class MetadataDownloadErrors(ResolutionError):
    """Metadata of some modules could not be downloaded.

    ``errors`` pairs each failing (module, version) with its messages.
    """

    def __init__(
        self, errors: list[tuple[tuple[ModuleCoordinate, str], list[str]]]
    ) -> None:
        self.errors = errors
        modules = ", ".join(f"{mod}:{ver}" for (mod, ver), _ in errors)
        super().__init__(f"Error downloading {modules}")


class ConflictingDependencies(ResolutionError):
    """Several incompatible versions of the same modules were required."""

    def __init__(self, dependencies: list[tuple[ModuleCoordinate, str]]) -> None:
        self.dependencies = dependencies
        listed = ", ".join(f"{mod}:{ver}" for mod, ver in dependencies)
        super().__init__(f"Conflicting dependencies: {listed}")


class MaximumIterationReached(ResolutionError):
    """The engine hit its iteration cap before converging."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Maximum number of iterations reached ({max_iterations})")


class InvalidRepository(ResolutionError):
    """A repository definition the engine cannot use."""

    def __init__(self, repository: str, reason: str) -> None:
        self.repository = repository
        self.reason = reason
        super().__init__(f"Invalid repository {repository}: {reason}")


class UnsatisfiableRule(ResolutionError):
    """A resolution rule (e.g. a version constraint) cannot be met."""

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__(f"Unsatisfiable rule {rule}: {message}")


class SeveralErrors(ResolutionError):
    """More than one independent failure of different kinds."""

    def __init__(self, errors: list[ResolutionError]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors))


class EngineFailure(ResolutionError):
    """Internal fault of the engine, wrapping the original exception."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Resolver engine failure: {cause}")

    def exception(self) -> Exception:
        if isinstance(self.cause, Exception):
            return self.cause
        return self


class ResolveException(Exception):
    """Underlying errors and the modules they concern, carried by a warning."""

    def __init__(self, messages: list[str], failed: list[ModuleID]) -> None:
        self.messages = messages
        self.failed = failed
        super().__init__("\n".join(messages))


@dataclass(frozen=True)
class UnresolvedWarningConfiguration:
    """Caller-supplied context for rendering unresolved warnings.

    ``module_positions`` maps ``org:name`` keys to where the build declared
    the module (e.g. ``build.conf:12``).
    """

    module_positions: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UnresolvedWarning:
    """Recoverable resolution failure returned instead of a report."""

    resolve_exception: ResolveException
    config: UnresolvedWarningConfiguration

    @property
    def failed_modules(self) -> list[ModuleID]:
        return list(self.resolve_exception.failed)

    def lines(self) -> list[str]:
        """Human-readable summary, one line per failed module."""
        out = ["Unresolved dependencies:"]
        for module in self.resolve_exception.failed:
            line = f"  :: {module}: not found"
            position = self.config.module_positions.get(
                f"{module.organization}:{module.name}"
            )
            if position:
                line += f" (declared at {position})"
            out.append(line)
        return out
