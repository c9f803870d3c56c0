"""dep-resolution: resolve declared dependencies, fetch artifacts, report."""

__version__ = "0.1.0"
