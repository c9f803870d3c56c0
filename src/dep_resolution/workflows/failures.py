"""Translate resolver engine errors into warnings or hard failures."""

from __future__ import annotations

import logging

from dep_resolution.entities.errors import (
    MetadataDownloadErrors,
    ResolutionError,
    ResolveException,
    UnresolvedWarning,
    UnresolvedWarningConfiguration,
)
from dep_resolution.entities.modules import ModuleID

logger = logging.getLogger(__name__)


def failed_module_ids(error: MetadataDownloadErrors) -> list[ModuleID]:
    """Module identities (with extra attributes) of every failing module."""
    return [
        ModuleID(
            organization=module.organization,
            name=module.name,
            revision=version,
            extra_attributes=module.attributes,
        )
        for (module, version), _ in error.errors
    ]


def resolution_exception(error: ResolutionError) -> ResolveException | Exception:
    """Classify an engine error.

    Metadata download failures become a ``ResolveException`` to be reported
    as a warning. Any other variant yields the exception to raise as is.
    """
    if isinstance(error, MetadataDownloadErrors):
        messages = [message for _, messages in error.errors for message in messages]
        return ResolveException(messages, failed_module_ids(error))
    return error.exception()


def unresolved_warning_or_raise(
    config: UnresolvedWarningConfiguration,
    error: ResolutionError,
) -> UnresolvedWarning:
    """Return the warning for a recoverable error, raise anything else.

    Raises:
        TypeError: if ``error`` is not a ``ResolutionError``.
        Exception: the engine's own exception for unrecoverable errors.
    """
    if not isinstance(error, ResolutionError):
        raise TypeError(f"not a resolution error: {error!r}")

    translated = resolution_exception(error)
    if isinstance(translated, ResolveException):
        logger.debug(
            "Resolution failed for %d module(s), reporting a warning",
            len(translated.failed),
        )
        return UnresolvedWarning(resolve_exception=translated, config=config)
    raise translated
