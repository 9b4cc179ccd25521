# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fingerprinted artifact storage guarded by an exclusive-create build claim.

Artifacts live at ``<out_dir>/<fingerprint>.<ext>``. A builder first creates a
hidden claim ``.<fingerprint>.<ext>.part`` with ``O_CREAT | O_EXCL``, streams
the pipeline output into it and renames it onto the artifact name once the
build succeeds, so the fingerprinted name only ever refers to complete files.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Final

LOGGER = logging.getLogger(__name__)

CLAIM_SUFFIX: Final[str] = ".part"
STALE_CLAIM_SECONDS: Final[float] = 300.0
_EXCLUSIVE_FLAGS: Final[int] = os.O_CREAT | os.O_EXCL | os.O_WRONLY | getattr(os, "O_BINARY", 0)


def fingerprint(identifiers: Iterable[str | os.PathLike[str]]) -> str:
    """Return the hex MD5 digest of the concatenated ``identifiers``.

    Order matters: the same identifiers in another order give another fingerprint.
    """

    digest = hashlib.md5(usedforsecurity=False)
    digest.update("".join(os.fspath(item) for item in identifiers).encode("utf-8"))
    return digest.hexdigest()


@dataclass(slots=True)
class ArtifactHandle:
    """Result of :meth:`AssetCache.open_or_reuse`.

    ``claim`` is set only for the caller that won the exclusive create; every
    other caller receives a read-only handle pointing at the same ``path``.
    """

    fingerprint: str
    path: Path
    claim: Path | None = None
    _fd: int | None = field(default=None, repr=False)

    @property
    def is_builder(self) -> bool:
        """Return ``True`` when this caller must populate the artifact."""

        return self._fd is not None

    @contextmanager
    def writer(self) -> Iterator[BinaryIO]:
        """Yield the append-only build stream and publish the artifact on success.

        On an exception the partial claim is removed and the exception re-raised,
        so a later request for the same fingerprint builds again.

        Raises:
            RuntimeError: If the handle is a cache hit or was already consumed.
        """

        if self._fd is None or self.claim is None:
            raise RuntimeError(f"{self.path} is not open for building")
        fd, claim = self._fd, self.claim
        self._fd = None
        try:
            with os.fdopen(fd, "wb") as stream:
                yield stream
                stream.flush()
                os.fsync(stream.fileno())
        except BaseException:
            _unlink_quietly(claim)
            raise
        os.replace(claim, self.path)
        LOGGER.debug("published %s", self.path)

    def abandon(self) -> None:
        """Release an unused build claim without publishing anything."""

        if self._fd is None or self.claim is None:
            return
        os.close(self._fd)
        self._fd = None
        _unlink_quietly(self.claim)


class AssetCache:
    """Map fingerprints to artifact files inside ``directory``."""

    def __init__(self, directory: Path, *, stale_after: float = STALE_CLAIM_SECONDS) -> None:
        """Initialise the cache rooted at ``directory`` (created with parents).

        Args:
            directory: Directory holding artifacts and build claims.
            stale_after: Age in seconds after which an unpublished claim is
                reported as abandoned.
        """

        self._stale_after = stale_after
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def artifact_path(self, digest: str, extension: str) -> Path:
        """Return the deterministic artifact path for ``digest`` and ``extension``."""

        return self._dir / f"{digest}.{extension.lstrip('.')}"

    def claim_path(self, digest: str, extension: str) -> Path:
        """Return the hidden build-claim path for ``digest`` and ``extension``."""

        return self._dir / f".{self.artifact_path(digest, extension).name}{CLAIM_SUFFIX}"

    def open_or_reuse(self, digest: str, extension: str) -> ArtifactHandle:
        """Claim the artifact for building or report that it already exists.

        Args:
            digest: Fingerprint of the asset group.
            extension: Artifact extension (``js`` or ``css``).

        Returns:
            ArtifactHandle: Builder handle when this caller won the exclusive
            create, otherwise a read-only handle for the existing artifact.
        """

        path = self.artifact_path(digest, extension)
        if path.exists():
            return ArtifactHandle(fingerprint=digest, path=path)
        claim = self.claim_path(digest, extension)
        try:
            fd = os.open(claim, _EXCLUSIVE_FLAGS, 0o644)
        except FileExistsError:
            self._report_claimed(claim, path)
            return ArtifactHandle(fingerprint=digest, path=path)
        handle = ArtifactHandle(fingerprint=digest, path=path, claim=claim, _fd=fd)
        if path.exists():
            # Another builder published between the existence check and the claim.
            handle.abandon()
            return ArtifactHandle(fingerprint=digest, path=path)
        return handle

    def _report_claimed(self, claim: Path, path: Path) -> None:
        try:
            age = time.time() - claim.stat().st_mtime
        except FileNotFoundError:
            LOGGER.debug("build of %s finished while checking its claim", path)
            return
        if age < self._stale_after:
            LOGGER.debug("build of %s already claimed", path)
            return
        LOGGER.warning(
            "build claim %s is %.0fs old and %s was never published; reset the cache if no build is running",
            claim,
            age,
            path.name,
        )

    def reset(self) -> list[Path]:
        """Remove every artifact and stale build claim from the cache directory.

        Returns:
            list[Path]: Files that were removed, sorted by name.
        """

        removed: list[Path] = []
        for entry in sorted(self._dir.iterdir()):
            if not entry.is_file():
                continue
            name = entry.name
            if name.startswith(".") and not name.endswith(CLAIM_SUFFIX):
                continue
            entry.unlink()
            removed.append(entry)
        if removed:
            LOGGER.info("removed %d cached artifact(s) from %s", len(removed), self._dir)
        return removed


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        return


__all__ = ["CLAIM_SUFFIX", "STALE_CLAIM_SECONDS", "ArtifactHandle", "AssetCache", "fingerprint"]
