"""Tests for the in-memory catalog resolver engine."""

from __future__ import annotations

from helpers import coord, dep, make_params, metadata

from dep_resolution.engine.catalog import CatalogResolverEngine, version_key
from dep_resolution.engine.protocols import ResolverEngine
from dep_resolution.entities.errors import MaximumIterationReached, MetadataDownloadErrors
from dep_resolution.entities.modules import Exclusion, FallbackDependency, Project
from dep_resolution.entities.resolution import Resolution


def _versions(resolution: object) -> dict[str, str]:
    assert isinstance(resolution, Resolution)
    return {m.module.name: m.version for m in resolution.modules}


class TestVersionKey:
    def test_ordering(self) -> None:
        versions = ["1.10", "1.0-M1", "1.2", "1.0.1"]
        assert sorted(versions, key=version_key) == ["1.0-M1", "1.0.1", "1.2", "1.10"]


class TestResolve:
    """Graph traversal and version selection."""

    def test_satisfies_protocol(self, engine: CatalogResolverEngine) -> None:
        assert isinstance(engine, ResolverEngine)
        assert len(engine) == 6

    def test_transitive_dependencies(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(make_params([("compile", dep("org.example", "core", "1.0"))]))
        assert _versions(result) == {"core": "1.0", "util": "1.0"}

    def test_highest_version_wins(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params(
                [
                    ("compile", dep("org.example", "core", "1.0")),
                    ("compile", dep("org.example", "web", "2.0")),
                ]
            )
        )
        assert _versions(result) == {"core": "1.0", "util": "1.1", "web": "2.0"}

    def test_modules_sorted_by_key(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(make_params([("compile", dep("org.example", "web", "2.0"))]))
        assert isinstance(result, Resolution)
        keys = [m.module.key for m in result.modules]
        assert keys == sorted(keys)

    def test_exclusions_prune_subgraph(self, engine: CatalogResolverEngine) -> None:
        excluded = dep(
            "org.example",
            "core",
            "1.0",
            exclusions=frozenset({Exclusion(organization="org.example", name="util")}),
        )
        result = engine.resolve(make_params([("compile", excluded)]))
        assert _versions(result) == {"core": "1.0"}

    def test_intransitive_dependency(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params([("compile", dep("org.example", "core", "1.0", transitive=False))])
        )
        assert _versions(result) == {"core": "1.0"}

    def test_optional_children_skipped(self) -> None:
        engine = CatalogResolverEngine(
            [
                metadata(
                    "org.example",
                    "plugin",
                    "1.0",
                    dependencies=(dep("org.example", "extra", "1.0", optional=True),),
                )
            ]
        )
        result = engine.resolve(make_params([("compile", dep("org.example", "plugin", "1.0"))]))
        assert _versions(result) == {"plugin": "1.0"}

    def test_empty_dependencies(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(make_params([], max_iterations=1))
        assert isinstance(result, Resolution)
        assert result.modules == ()

    def test_auto_platform_library(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params(
                [("compile", dep("org.example", "util", "1.0"))],
                auto_platform_library=True,
            )
        )
        assert _versions(result) == {"util": "1.0", "scala-library": "2.13.12"}

    def test_platform_library_not_duplicated(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params(
                [("compile", dep("org.scala-lang", "scala-library", "2.13.12"))],
                auto_platform_library=True,
            )
        )
        assert isinstance(result, Resolution)
        assert len(result.root_dependencies) == 1


class TestSources:
    """Inter-project modules and fallback URLs."""

    def test_inter_project_module_preferred(self, engine: CatalogResolverEngine) -> None:
        project = Project(module=coord("org.example", "util"), version="1.0-local")
        result = engine.resolve(
            make_params(
                [("compile", dep("org.example", "core", "1.0"))],
                inter_project_dependencies=(project,),
            )
        )
        assert isinstance(result, Resolution)
        util = result.module(coord("org.example", "util"))
        assert util is not None
        assert util.version == "1.0-local"
        assert util.artifacts == ()

    def test_fallback_dependency(self, engine: CatalogResolverEngine) -> None:
        fallback = FallbackDependency(
            module=coord("org.example", "legacy"),
            version="0.1",
            url="https://downloads.example.com/legacy-0.1.jar",
        )
        result = engine.resolve(
            make_params(
                [("compile", dep("org.example", "legacy", "0.1"))],
                fallback_dependencies=(fallback,),
            )
        )
        assert isinstance(result, Resolution)
        (module,) = result.modules
        assert [a.url for a in module.artifacts] == [fallback.url]


class TestErrors:
    """Failures are returned, not raised."""

    def test_missing_modules_reported_together(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params(
                [
                    ("compile", dep("org.example", "ghost-b", "2.0")),
                    ("compile", dep("org.example", "ghost-a", "1.0")),
                    ("compile", dep("org.example", "core", "1.0")),
                ]
            )
        )
        assert isinstance(result, MetadataDownloadErrors)
        assert [(m.name, v) for (m, v), _ in result.errors] == [
            ("ghost-a", "1.0"),
            ("ghost-b", "2.0"),
        ]
        assert "no repository" in result.errors[0][1][0]

    def test_iteration_cap(self, engine: CatalogResolverEngine) -> None:
        result = engine.resolve(
            make_params([("compile", dep("org.example", "core", "1.0"))], max_iterations=1)
        )
        assert isinstance(result, MaximumIterationReached)
        assert result.max_iterations == 1
