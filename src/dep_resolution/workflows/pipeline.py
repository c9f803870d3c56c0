"""Resolution pipeline: resolve, fetch, assemble."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from dep_resolution.config import CachePolicy
from dep_resolution.entities.descriptors import NativeDescriptor
from dep_resolution.entities.errors import (
    ResolutionError,
    UnresolvedWarningConfiguration,
)
from dep_resolution.entities.report import UpdateStats
from dep_resolution.nodes.inputs.normalizer import normalize
from dep_resolution.nodes.report.builder import DefaultReportBuilder
from dep_resolution.workflows.failures import unresolved_warning_or_raise
from dep_resolution.workflows.models import (
    ArtifactsParams,
    PipelineOutcome,
    PipelineStage,
    ResolutionParams,
    UpdateConfiguration,
    UpdateParams,
)

if TYPE_CHECKING:
    from dep_resolution.config import ResolutionConfig
    from dep_resolution.engine.protocols import (
        ArtifactFetcher,
        ReportBuilder,
        ResolverEngine,
    )
    from dep_resolution.entities.errors import UnresolvedWarning
    from dep_resolution.entities.modules import ModuleSettings
    from dep_resolution.entities.report import UpdateReport
    from dep_resolution.entities.resolution import Resolution
    from dep_resolution.nodes.inputs.normalizer import ResolutionRequest

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class ResolutionPipeline:
    """Runs the three stages for a normalized request.

    Stages run at most once each, in order. Only a resolution failure stops
    the run; fetch errors travel into the report as data.
    """

    def __init__(
        self,
        engine: ResolverEngine,
        fetcher: ArtifactFetcher,
        report_builder: ReportBuilder | None = None,
    ) -> None:
        self._engine = engine
        self._fetcher = fetcher
        self._report_builder = report_builder or DefaultReportBuilder()

    def resolution_params(
        self,
        request: ResolutionRequest,
        configuration_set: frozenset[str],
        cache_policies: tuple[CachePolicy, ...],
        log: logging.Logger,
    ) -> ResolutionParams:
        """Engine input restricted to the dependencies of one configuration set."""
        return ResolutionParams(
            configuration_set=configuration_set,
            dependencies=tuple(
                (scope, dep)
                for scope, dep in request.dependencies
                if scope in configuration_set
            ),
            fallback_dependencies=request.fallback_dependencies,
            repositories=request.repositories.ordered,
            inter_project_dependencies=request.inter_project_dependencies,
            platform_organization=request.platform_organization,
            platform_version=request.platform_version,
            typelevel=request.typelevel,
            auto_platform_library=request.auto_platform_library,
            maven_profiles=request.maven_profiles,
            max_iterations=request.max_iterations,
            cache=request.cache,
            cache_policies=cache_policies,
            logger=log,
        )

    def _resolve(
        self,
        request: ResolutionRequest,
        cache_policies: tuple[CachePolicy, ...],
        log: logging.Logger,
    ) -> dict[frozenset[str], Resolution] | ResolutionError:
        conf_sets = request.configuration_graph.sets
        if not conf_sets:
            return {}

        params = [
            self.resolution_params(request, conf_set, cache_policies, log)
            for conf_set in conf_sets
        ]
        workers = max(1, min(request.parallel_downloads, len(params)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._engine.resolve, p) for p in params]
            results = [future.result() for future in futures]

        resolutions: dict[frozenset[str], Resolution] = {}
        for conf_set, result in zip(conf_sets, results, strict=True):
            if isinstance(result, ResolutionError):
                log.debug(
                    "Resolution of %s failed: %s", ", ".join(sorted(conf_set)), result
                )
                return result
            resolutions[conf_set] = result
        return resolutions

    def run(
        self,
        request: ResolutionRequest,
        cache_policies: tuple[CachePolicy, ...] | None = None,
        log: logging.Logger = logger,
    ) -> PipelineOutcome:
        """Execute resolve, fetch and assemble for ``request``."""
        log.debug("Pipeline stage: %s (%s)", PipelineStage.START, request.module)
        policies = cache_policies if cache_policies is not None else request.cache.policies

        # Stage 1: one engine call per configuration set, joined before fetching
        log.debug("Pipeline stage: %s", PipelineStage.RESOLVING)
        start = time.perf_counter()
        resolved = self._resolve(request, policies, log)
        resolve_ms = _elapsed_ms(start)
        if isinstance(resolved, ResolutionError):
            log.debug("Pipeline stage: %s", PipelineStage.FAILED)
            return PipelineOutcome(stage=PipelineStage.FAILED, error=resolved)
        log.info(
            "Resolved %s in %d configuration set(s) (%.0f ms)",
            request.module,
            len(resolved),
            resolve_ms,
        )

        # Stage 2: fetch errors are kept per artifact
        log.debug("Pipeline stage: %s", PipelineStage.FETCHING)
        start = time.perf_counter()
        artifacts = self._fetcher.fetch(
            ArtifactsParams(
                resolutions=tuple(resolved.values()),
                classifiers=request.classifiers,
                parallel_downloads=request.parallel_downloads,
                cache=request.cache,
                cache_policies=policies,
                logger=log,
            )
        )
        fetch_ms = _elapsed_ms(start)
        failed = sum(1 for value in artifacts.values() if not isinstance(value, Path))
        if failed:
            log.warning("%d of %d artifact(s) could not be fetched", failed, len(artifacts))

        # Stage 3
        log.debug("Pipeline stage: %s", PipelineStage.ASSEMBLING)
        start = time.perf_counter()
        report = self._report_builder.build(
            UpdateParams(
                dependencies=request.dependencies,
                configurations=request.configurations,
                configuration_graph=request.configuration_graph,
                resolutions=resolved,
                artifacts=artifacts,
                classifiers=request.classifiers,
                platform_jar_overrides=request.platform_jar_overrides,
            )
        )
        stats = UpdateStats(
            resolve_ms=resolve_ms,
            fetch_ms=fetch_ms,
            assemble_ms=_elapsed_ms(start),
        )

        log.debug("Pipeline stage: %s", PipelineStage.DONE)
        return PipelineOutcome(
            stage=PipelineStage.DONE, report=report.model_copy(update={"stats": stats})
        )


class DependencyResolution:
    """Caller-facing entry point: describe a module, then update it."""

    def __init__(
        self,
        config: ResolutionConfig,
        engine: ResolverEngine,
        fetcher: ArtifactFetcher,
        report_builder: ReportBuilder | None = None,
    ) -> None:
        self._config = config
        self._pipeline = ResolutionPipeline(engine, fetcher, report_builder)

    @property
    def config(self) -> ResolutionConfig:
        return self._config

    def describe(self, settings: ModuleSettings) -> NativeDescriptor:
        return NativeDescriptor(settings=settings)

    def update(
        self,
        descriptor: object,
        update_config: UpdateConfiguration | None = None,
        warning_config: UnresolvedWarningConfiguration | None = None,
        log: logging.Logger | None = None,
    ) -> UpdateReport | UnresolvedWarning:
        """Resolve and fetch ``descriptor``.

        Returns the report, or a warning when some modules' metadata could not
        be downloaded. Unrecoverable engine errors are raised.

        Raises:
            UnrecognizedDescriptorError: for descriptor shapes that cannot be
                resolved.
        """
        log = log or logger
        update_config = update_config or UpdateConfiguration()
        warning_config = warning_config or UnresolvedWarningConfiguration()

        request = normalize(descriptor, self._config, log)
        policies = (
            (CachePolicy.LOCAL_ONLY,) if update_config.offline else request.cache.policies
        )
        outcome = self._pipeline.run(request, cache_policies=policies, log=log)

        if outcome.error is not None:
            return unresolved_warning_or_raise(warning_config, outcome.error)
        if outcome.report is None:
            raise RuntimeError(f"pipeline ended in {outcome.stage} without a report")
        return outcome.report
