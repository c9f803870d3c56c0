"""Tests for resolver reordering, conversion and repository assembly."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import SecretStr

from dep_resolution.entities.modules import ModuleCoordinate, Project
from dep_resolution.entities.repositories import (
    Authentication,
    Repository,
    RepositoryKind,
    Resolver,
)
from dep_resolution.nodes.inputs.repositories import (
    DEFAULT_IVY_PATTERN,
    assemble_repositories,
    deduplicate_repositories,
    default_ivy_properties,
    global_plugin_patterns,
    reorder_resolvers,
    substitute_properties,
    to_repository,
    with_authentication_by_host,
)

CENTRAL = Resolver(name="central", kind="maven", root="https://repo1.maven.org/maven2/")
TYPESAFE = Resolver(
    name="typesafe", kind="maven", root="https://repo.typesafe.com/typesafe/releases/"
)
SBT_PLUGINS = Resolver(
    name="sbt-plugins",
    kind="ivy",
    ivy_patterns=(
        "https://repo.scala-sbt.org/scalasbt/sbt-plugin-releases/"
        "[organisation]/[module]/[revision]/ivys/ivy.xml",
    ),
)
LOCAL = Resolver(name="local", kind="file", root="/srv/repo", m2_compatible=True)


def _auth(user: str) -> Authentication:
    return Authentication(user=user, password=SecretStr("secret"))


def _assemble(resolvers: list[Resolver], tmp_path: Path, **kwargs) -> tuple[Repository, ...]:
    return assemble_repositories(
        resolvers,
        plugin_base=tmp_path / "plugins",
        properties=default_ivy_properties(tmp_path),
        authentication_by_repository_id=kwargs.get("by_id", {}),
        authentication_by_host=kwargs.get("by_host", {}),
        inter_project_dependencies=kwargs.get("projects", ()),
    ).ordered


class TestReorderResolvers:
    """Tests for reorder_resolvers."""

    def test_slow_repositories_moved_last(self) -> None:
        reordered = reorder_resolvers([TYPESAFE, LOCAL, CENTRAL, SBT_PLUGINS])
        assert [r.name for r in reordered] == [
            "local",
            "central",
            "typesafe",
            "sbt-plugins",
        ]

    def test_unchanged_without_fast_repository(self) -> None:
        reordered = reorder_resolvers([TYPESAFE, LOCAL, SBT_PLUGINS])
        assert reordered == [TYPESAFE, LOCAL, SBT_PLUGINS]

    def test_unchanged_without_slow_repository(self) -> None:
        assert reorder_resolvers([LOCAL, CENTRAL]) == [LOCAL, CENTRAL]


class TestToRepository:
    """Tests for converting declared resolvers."""

    def test_maven_root_gets_trailing_slash(self) -> None:
        resolver = Resolver(name="r", kind="maven", root="https://repo.example.com/m2")
        repo = to_repository(resolver, {})
        assert repo is not None
        assert repo.kind == RepositoryKind.MAVEN
        assert repo.root == "https://repo.example.com/m2/"

    def test_m2_file_resolver_becomes_maven(self) -> None:
        repo = to_repository(LOCAL, {})
        assert repo is not None
        assert repo.kind == RepositoryKind.MAVEN
        assert repo.root == "file:///srv/repo/"

    def test_ivy_resolver_without_patterns_uses_default_layout(self) -> None:
        resolver = Resolver(name="ivy", kind="url", root="https://ivy.example.com/releases")
        repo = to_repository(resolver, {})
        assert repo is not None
        assert repo.kind == RepositoryKind.IVY
        assert repo.ivy_patterns == (
            "https://ivy.example.com/releases/" + DEFAULT_IVY_PATTERN,
        )
        assert repo.artifact_patterns == repo.ivy_patterns

    def test_patterns_expand_properties(self, tmp_path: Path) -> None:
        resolver = Resolver(
            name="local-ivy",
            kind="ivy",
            ivy_patterns=("${ivy.home}/local/[organisation]/[module]/ivy.xml",),
        )
        repo = to_repository(resolver, default_ivy_properties(tmp_path))
        assert repo is not None
        assert repo.ivy_patterns[0].startswith(str(tmp_path / ".ivy2" / "local"))

    def test_unknown_property_kept(self) -> None:
        assert substitute_properties("${nope}/x", {}) == "${nope}/x"

    def test_unsupported_kind_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        resolver = Resolver(name="chain", kind="chain")
        with caplog.at_level(logging.WARNING):
            assert to_repository(resolver, {}) is None
        assert "chain" in caplog.text

    def test_ivy_resolver_without_root_or_patterns_skipped(self) -> None:
        assert to_repository(Resolver(name="empty", kind="ivy"), {}) is None


class TestAuthentication:
    """Tests for repository id and host credentials."""

    def test_id_wins_over_host(self, tmp_path: Path) -> None:
        private = Resolver(name="private", kind="maven", root="https://nexus.acme.com/repo")
        mirror = Resolver(name="mirror", kind="maven", root="https://nexus.acme.com/mirror")
        by_id = {"private": _auth("deploy")}
        by_host = {"nexus.acme.com": _auth("reader")}

        repos = _assemble([private, mirror], tmp_path, by_id=by_id, by_host=by_host)
        assert repos[0].authentication is not None
        assert repos[0].authentication.user == "deploy"
        assert repos[1].authentication is not None
        assert repos[1].authentication.user == "reader"

    def test_host_lookup_for_pattern_repository(self) -> None:
        repo = Repository(
            kind=RepositoryKind.IVY,
            ivy_patterns=("https://ivy.acme.com/[organisation]/[module]/ivy.xml",),
        )
        authed = with_authentication_by_host(repo, {"ivy.acme.com": _auth("ivy")})
        assert authed.authentication is not None
        assert authed.authentication.user == "ivy"

    def test_unknown_host_left_alone(self) -> None:
        repo = Repository(kind=RepositoryKind.MAVEN, root="https://other.example.com/")
        assert with_authentication_by_host(repo, {"nexus.acme.com": _auth("x")}) is repo

    def test_password_not_in_repr(self) -> None:
        assert "secret" not in repr(_auth("deploy"))


class TestAssembleRepositories:
    """Tests for the final repository list."""

    def test_internal_repositories_follow_user_repositories(self, tmp_path: Path) -> None:
        project = Project(
            module=ModuleCoordinate(organization="com.acme", name="shared"),
            version="0.1.0",
        )
        repos = _assemble([CENTRAL, LOCAL], tmp_path, projects=(project,))

        assert [r.name for r in repos[:2]] == ["central", "local"]
        plugins = repos[2:-1]
        assert len(plugins) == 2
        for repo in plugins:
            assert repo.kind == RepositoryKind.IVY
            assert repo.with_artifacts is False
            assert repo.with_checksums is False
            assert repo.with_signatures is False
        inter_project = repos[-1]
        assert inter_project.kind == RepositoryKind.INTER_PROJECT
        assert inter_project.projects == (project,)

    def test_unsupported_resolvers_dropped(self, tmp_path: Path) -> None:
        repos = _assemble([Resolver(name="odd", kind="svn"), CENTRAL], tmp_path)
        assert [r.name for r in repos if r.kind == RepositoryKind.MAVEN] == ["central"]

    def test_plugin_patterns(self, tmp_path: Path) -> None:
        patterns = global_plugin_patterns(tmp_path)
        assert len(patterns) == 2
        for pattern in patterns:
            assert pattern.startswith(tmp_path.as_uri() + "/plugins/target")
            assert pattern.endswith("/[revision]/resolved.xml.[ext]")


class TestDeduplicateRepositories:
    """Repeated repositories are kept once, at their first position."""

    def test_repeated_resolver_kept_once(self, tmp_path: Path) -> None:
        repos = _assemble([CENTRAL, LOCAL, CENTRAL], tmp_path)
        assert [r.name for r in repos if r.kind == RepositoryKind.MAVEN] == [
            "central",
            "local",
        ]

    def test_same_location_under_another_name_dropped(self, tmp_path: Path) -> None:
        mirror = Resolver(name="central-again", kind="maven", root=CENTRAL.root)
        repos = _assemble([LOCAL, CENTRAL, mirror], tmp_path)
        assert [r.name for r in repos if r.kind == RepositoryKind.MAVEN] == [
            "local",
            "central",
        ]

    def test_distinct_repositories_untouched(self) -> None:
        first = Repository(kind=RepositoryKind.MAVEN, name="a", root="https://a.example.com/")
        second = Repository(kind=RepositoryKind.MAVEN, name="b", root="https://b.example.com/")
        repeated = Repository(kind=RepositoryKind.MAVEN, name="a", root="https://c.example.com/")
        assert deduplicate_repositories([first, second, repeated]) == [first, second]
