"""Base class for manifest fetchers and checksum document parsing.

A fetcher turns an (artifact, version) pair into a ``Manifest``. Every failure
surfaces as a single ``FetchError``; the verification engine only needs to
know whether the manifest is available.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pluginguard.core.models import ChecksumSet, Manifest
from pluginguard.exceptions import FetchError


class ManifestFetcher(ABC):
    """Abstract source of authoritative checksum manifests."""

    @abstractmethod
    async def fetch_plugin(self, name: str, version: str) -> Manifest:
        """Fetch the checksums of one plugin release.

        Raises:
            FetchError: If the manifest is unavailable.
        """

    @abstractmethod
    async def fetch_core(self, version: str, locale: str) -> Manifest:
        """Fetch the checksums of one core release, keyed by path from the
        installation root (e.g. ``wp-content/plugins/hello.php``).

        Raises:
            FetchError: If the manifest is unavailable.
        """


def to_checksum_set(value: Any) -> ChecksumSet:  # noqa: ANN401
    """Normalise one file's checksum entry.

    Accepts ``{"sha256": "...", "md5": ["...", "..."]}`` style objects, where
    each algorithm maps to one digest or a list of acceptable digests, and a
    bare string, which is taken as an MD5 digest (the core format).

    Raises:
        FetchError: If the entry has neither shape.
    """
    if isinstance(value, str):
        return {"md5": frozenset({value.lower()})}
    if not isinstance(value, dict):
        raise FetchError(f"Malformed checksum entry: {value!r}")

    checksums: dict[str, frozenset] = {}
    for algorithm, digests in value.items():
        if isinstance(digests, str):
            digests = [digests]
        if not isinstance(digests, list):
            raise FetchError(f"Malformed {algorithm} checksums: {digests!r}")
        if not all(isinstance(d, str) for d in digests):
            raise FetchError(f"Malformed {algorithm} checksums: {digests!r}")
        checksums[str(algorithm).lower()] = frozenset(d.lower() for d in digests)
    return checksums


def build_manifest(name: str, version: str, files: Any) -> Manifest:  # noqa: ANN401
    """Build a ``Manifest`` from a ``{path: entry}`` mapping.

    Raises:
        FetchError: If ``files`` is not a mapping or an entry is malformed.
    """
    if not isinstance(files, dict):
        raise FetchError(f"Checksums for {name} {version} are not a file mapping.")
    return Manifest(
        name=name,
        version=version,
        entries={str(path): to_checksum_set(entry) for path, entry in files.items()},
    )
