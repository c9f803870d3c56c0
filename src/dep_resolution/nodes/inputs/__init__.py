"""Input normalization: request, configuration graph, repositories."""

from dep_resolution.nodes.inputs.config_graph import (
    ConfigurationGraph,
    build_configuration_graph,
    config_extends,
    configuration_closures,
    configuration_sets,
)
from dep_resolution.nodes.inputs.normalizer import (
    ResolutionRequest,
    module_settings,
    normalize,
)
from dep_resolution.nodes.inputs.repositories import (
    AssembledRepositories,
    assemble_repositories,
    deduplicate_repositories,
    reorder_resolvers,
    with_authentication_by_host,
)

__all__ = [
    "AssembledRepositories",
    "ConfigurationGraph",
    "ResolutionRequest",
    "assemble_repositories",
    "build_configuration_graph",
    "config_extends",
    "configuration_closures",
    "configuration_sets",
    "deduplicate_repositories",
    "module_settings",
    "normalize",
    "reorder_resolvers",
    "with_authentication_by_host",
]
