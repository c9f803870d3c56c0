"""Module descriptor variants accepted by the resolution entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dep_resolution.entities.modules import ModuleSettings


@dataclass(frozen=True)
class NativeDescriptor:
    """Descriptor produced by this package's ``describe``."""

    settings: ModuleSettings


@dataclass(frozen=True)
class ForeignDescriptor:
    """Descriptor produced by another dependency manager of the build tool.

    Only foreign descriptors wrapping ``ModuleSettings`` can be resolved.
    """

    settings: object


ModuleDescriptor = NativeDescriptor | ForeignDescriptor
