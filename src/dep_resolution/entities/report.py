"""Update report models returned to the caller."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003

from pydantic import BaseModel, Field

from dep_resolution.entities.modules import ModuleID  # noqa: TC001
from dep_resolution.entities.resolution import Artifact, FileError  # noqa: TC001


class ArtifactReport(BaseModel):
    """An artifact with either its file on disk or the error fetching it."""

    artifact: Artifact
    file: Path | None = None
    error: FileError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.file is not None


class ModuleReport(BaseModel):
    """A resolved module and its artifacts within one configuration."""

    module: ModuleID
    artifacts: list[ArtifactReport] = Field(default_factory=list)

    @property
    def missing(self) -> list[ArtifactReport]:
        return [a for a in self.artifacts if not a.ok]


class ConfigurationReport(BaseModel):
    """Resolved modules of one configuration."""

    configuration: str
    modules: list[ModuleReport] = Field(default_factory=list)


class UpdateStats(BaseModel):
    """Wall-clock time spent in each pipeline stage, in milliseconds."""

    resolve_ms: float = 0.0
    fetch_ms: float = 0.0
    assemble_ms: float = 0.0


class UpdateReport(BaseModel):
    """Final output of a resolution: modules and artifacts per configuration."""

    configurations: dict[str, ConfigurationReport] = Field(default_factory=dict)
    stats: UpdateStats = Field(default_factory=UpdateStats)

    def configuration(self, name: str) -> ConfigurationReport | None:
        return self.configurations.get(name)

    def all_artifacts(self) -> list[ArtifactReport]:
        """Every artifact report, deduplicated across configurations."""
        seen: set[Artifact] = set()
        reports: list[ArtifactReport] = []
        for conf_report in self.configurations.values():
            for module_report in conf_report.modules:
                for artifact_report in module_report.artifacts:
                    if artifact_report.artifact not in seen:
                        seen.add(artifact_report.artifact)
                        reports.append(artifact_report)
        return reports

    def errors(self) -> list[ArtifactReport]:
        return [a for a in self.all_artifacts() if a.error is not None]


class PlatformJarOverrides(BaseModel):
    """Jars of the platform library the build tool runs on.

    When a resolved module matches ``organization`` and ``version`` and its
    name is in ``jars``, the report points at the given file instead of the
    fetched one.
    """

    organization: str
    version: str
    jars: dict[str, Path] = Field(default_factory=dict)

    def override_for(self, organization: str, name: str, version: str) -> Path | None:
        if organization != self.organization or version != self.version:
            return None
        return self.jars.get(name)
