"""Checksum matching for a single file against a manifest entry.

A manifest entry may carry several algorithms, each with a set of
acceptable digests. The matcher picks exactly one algorithm (the
strongest one it supports that the entry provides), hashes the whole file
with it, and checks membership in that algorithm's acceptable set.

Algorithm preference is strict: if SHA-256 is present and the file's
SHA-256 is not acceptable, the result is a mismatch even when an MD5 in the
same entry would have matched. MD5 is consulted only when the entry has no
SHA-256 at all.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Sequence

from pluginguard.core.models import ChecksumSet, MatchResult

logger = logging.getLogger(__name__)

# Strongest first.
SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha256", "md5")


def compute_digest(path: Path, algorithm: str) -> str:
    """Hash the complete contents of ``path``.

    Args:
        path: File to hash.
        algorithm: A ``hashlib`` algorithm name.

    Returns:
        Lowercase hex digest.

    Raises:
        OSError: If the file cannot be read.
    """
    return hashlib.new(algorithm, path.read_bytes()).hexdigest()


class ChecksumMatcher:
    """Compare local files with manifest checksum sets.

    Args:
        algorithms: Algorithms this matcher may compute, strongest first.
    """

    def __init__(self, algorithms: Sequence[str] = SUPPORTED_ALGORITHMS) -> None:
        self.algorithms = tuple(algorithms)

    def select_algorithm(self, checksums: ChecksumSet) -> str | None:
        """Return the preferred algorithm present in ``checksums``, if any."""
        for algorithm in self.algorithms:
            if algorithm in checksums:
                return algorithm
        return None

    def match(self, path: Path, checksums: ChecksumSet) -> MatchResult:
        """Compare one file with one manifest entry.

        Args:
            path: Absolute path of the local file.
            checksums: The file's manifest entry.

        Returns:
            ``MATCH`` or ``MISMATCH`` for the selected algorithm, or
            ``NO_MATCHING_ALGORITHM`` when the entry offers nothing this
            matcher can compute (the file is not read in that case).

        Raises:
            OSError: If the file cannot be read.
        """
        algorithm = self.select_algorithm(checksums)
        if algorithm is None:
            logger.debug("No supported algorithm in %s for %s", sorted(checksums), path)
            return MatchResult.NO_MATCHING_ALGORITHM

        digest = compute_digest(path, algorithm)
        if digest in checksums[algorithm]:
            return MatchResult.MATCH
        logger.debug("%s mismatch for %s: %s", algorithm, path, digest)
        return MatchResult.MISMATCH


def match_file(path: Path, checksums: ChecksumSet) -> MatchResult:
    """Module-level shortcut using the default algorithm preference."""
    return ChecksumMatcher().match(path, checksums)
