"""Report assembly."""

from dep_resolution.nodes.report.builder import (
    DefaultReportBuilder,
    implicit_roots,
    reachable_modules,
)

__all__ = ["DefaultReportBuilder", "implicit_roots", "reachable_modules"]
