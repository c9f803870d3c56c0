"""Configuration graph: which configurations are resolved together."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import networkx as nx

from dep_resolution.entities.modules import (
    DEFAULT_TARGET_CONFIGURATION,
    CrossVersion,
    Dependency,
    ModuleCoordinate,
)

if TYPE_CHECKING:
    from dep_resolution.entities.modules import (
        Configuration,
        DependencyEntry,
        Exclusion,
        ModuleID,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigurationGraph:
    """Configuration sets plus each configuration's extends closure.

    ``sets`` partitions every known configuration; each set is resolved as
    one unit. ``closures`` maps a configuration to itself and everything it
    transitively extends.
    """

    sets: tuple[frozenset[str], ...]
    closures: dict[str, frozenset[str]]

    def set_for(self, configuration: str) -> frozenset[str] | None:
        for conf_set in self.sets:
            if configuration in conf_set:
                return conf_set
        return None


def config_extends(configurations: Iterable[Configuration]) -> dict[str, tuple[str, ...]]:
    """Map each configuration name to the names it extends."""
    return {conf.name: tuple(conf.extends) for conf in configurations}


def _extends_graph(extends: Mapping[str, Iterable[str]]) -> nx.DiGraph[str]:
    graph: nx.DiGraph[str] = nx.DiGraph()
    for name, parents in extends.items():
        graph.add_node(name)
        for parent in parents:
            graph.add_edge(name, parent)
    return graph


def _set_sort_key(conf_set: frozenset[str]) -> tuple[str, ...]:
    return tuple(sorted(conf_set))


def configuration_sets(extends: Mapping[str, Iterable[str]]) -> tuple[frozenset[str], ...]:
    """Group configurations linked by extends relations into sets.

    Each set is a weakly connected component of the extends graph, so the
    grouping depends only on the relations, never on declaration order.
    """
    graph = _extends_graph(extends)
    components = [
        frozenset(component)
        for component in nx.weakly_connected_components(graph)  # pyright: ignore[reportUnknownMemberType]
    ]
    return tuple(sorted(components, key=_set_sort_key))


def configuration_closures(extends: Mapping[str, Iterable[str]]) -> dict[str, frozenset[str]]:
    """Each configuration with every configuration it transitively extends."""
    graph = _extends_graph(extends)
    if not nx.is_directed_acyclic_graph(graph):
        logger.warning("Configuration extends relations contain a cycle")
    closures: dict[str, frozenset[str]] = {}
    for name in sorted(graph.nodes):
        descendants: set[str] = nx.descendants(graph, name)  # pyright: ignore[reportUnknownMemberType]
        closures[name] = frozenset(descendants | {name})
    return closures


def build_configuration_graph(configurations: Iterable[Configuration]) -> ConfigurationGraph:
    extends = config_extends(configurations)
    graph = ConfigurationGraph(
        sets=configuration_sets(extends),
        closures=configuration_closures(extends),
    )
    logger.debug(
        "Built configuration graph: %d configurations in %d sets",
        len(graph.closures),
        len(graph.sets),
    )
    return graph


def configuration_mappings(mapping: str | None) -> list[tuple[str, str]]:
    """Parse a ``from->to`` mapping string into (from, to) pairs.

    ``None`` means ``compile``; a scope without ``->`` maps to the default
    target configuration.
    """
    pairs: list[tuple[str, str]] = []
    for part in (mapping or "compile").split(";"):
        part = part.strip()
        if not part:
            continue
        if "->" in part:
            sources, target = part.split("->", 1)
            target = target.strip() or DEFAULT_TARGET_CONFIGURATION
        else:
            sources, target = part, DEFAULT_TARGET_CONFIGURATION
        for source in sources.split(","):
            source = source.strip()
            if source:
                pairs.append((source, target))
    return pairs


def cross_versioned_name(module_id: ModuleID, full_version: str, binary_version: str) -> str:
    if module_id.cross_version == CrossVersion.BINARY:
        return f"{module_id.name}_{binary_version}"
    if module_id.cross_version == CrossVersion.FULL:
        return f"{module_id.name}_{full_version}"
    return module_id.name


def flatten_dependencies(
    module_ids: Iterable[ModuleID],
    full_version: str,
    binary_version: str,
    exclusions: frozenset[Exclusion] = frozenset(),
) -> list[DependencyEntry]:
    """Expand declared modules into (configuration, dependency) entries.

    ``exclusions`` is unioned into every dependency's own exclusion set.
    """
    entries: list[DependencyEntry] = []
    for module_id in module_ids:
        coordinate = ModuleCoordinate(
            organization=module_id.organization,
            name=cross_versioned_name(module_id, full_version, binary_version),
            attributes=module_id.extra_attributes,
        )
        base = Dependency(
            module=coordinate,
            version=module_id.revision,
            exclusions=frozenset(module_id.exclusions) | exclusions,
            classifier=module_id.classifier,
            transitive=module_id.is_transitive,
        )
        for source, target in configuration_mappings(module_id.configurations):
            entries.append((source, base.model_copy(update={"configuration": target})))
    return entries
