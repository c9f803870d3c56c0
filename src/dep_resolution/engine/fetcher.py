"""Artifact fetcher that serves artifacts from a local directory tree."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from dep_resolution.entities.resolution import FileError, FileErrorKind

if TYPE_CHECKING:
    from dep_resolution.entities.resolution import Artifact
    from dep_resolution.workflows.models import ArtifactsParams

logger = logging.getLogger(__name__)


class DirectoryArtifactFetcher:
    """Maps artifact URLs onto files below ``root``.

    ``file:`` URLs are used as is. For other URLs the file is expected at
    ``root/<host>/<path>``, the layout of a mirrored download cache.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    def local_path(self, artifact: Artifact) -> Path:
        parsed = urlparse(artifact.url)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        return self._root / parsed.netloc / unquote(parsed.path).lstrip("/")

    def fetch_one(self, artifact: Artifact) -> Path | FileError:
        path = self.local_path(artifact)
        if path.is_file():
            return path
        return FileError(
            kind=FileErrorKind.NOT_FOUND,
            url=artifact.url,
            message=f"no file at {path}",
        )

    def fetch(self, params: ArtifactsParams) -> dict[Artifact, Path | FileError]:
        """Fetch every selected artifact of every resolution, in parallel."""
        artifacts: list[Artifact] = []
        seen: set[Artifact] = set()
        for resolution in params.resolutions:
            for artifact in resolution.artifacts(params.classifiers):
                if artifact not in seen:
                    seen.add(artifact)
                    artifacts.append(artifact)

        if not artifacts:
            return {}

        results: dict[Artifact, Path | FileError] = {}
        workers = max(1, min(params.parallel_downloads, len(artifacts)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.fetch_one, a): a for a in artifacts}
            for future in as_completed(futures):
                artifact = futures[future]
                results[artifact] = future.result()

        failed = [r for r in results.values() if isinstance(r, FileError)]
        params.logger.debug(
            "Fetched %d artifact(s), %d failed", len(results) - len(failed), len(failed)
        )
        # Keep the resolution order rather than completion order
        return {a: results[a] for a in artifacts}
