"""File set reconciliation for one artifact against one manifest.

Produces an ordered list of per-file verdicts:

1. Files listed in the manifest but absent locally (``MISSING``), in
   lexicographic order.
2. Every local file in lexicographic order: ``ADDED`` when the manifest
   does not list it, otherwise the checksum verdict. Soft-change files are
   left out entirely unless ``strict`` is set.

Each finding carries the message the CLI displays. Findings never stop the
reconciliation of the remaining files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pluginguard.core.matcher import ChecksumMatcher
from pluginguard.core.models import FileResult, FileVerdict, Manifest, MatchResult
from pluginguard.core.soft_change import is_soft_change

logger = logging.getLogger(__name__)

MSG_MISSING = "File is missing"
MSG_ADDED = "File was added"
MSG_MODIFIED = "Checksum does not match"
MSG_NO_ALGORITHM = "No matching checksum algorithm found"
MSG_UNREADABLE = "File could not be read"

_MATCH_VERDICTS: dict[MatchResult, tuple[FileVerdict, str]] = {
    MatchResult.MATCH: (FileVerdict.UNCHANGED, ""),
    MatchResult.MISMATCH: (FileVerdict.MODIFIED, MSG_MODIFIED),
    MatchResult.NO_MATCHING_ALGORITHM: (FileVerdict.MISSING_ALGORITHM, MSG_NO_ALGORITHM),
}


@dataclass(frozen=True)
class ReconcileResult:
    """Ordered verdicts for one artifact."""

    results: tuple[FileResult, ...] = ()

    @property
    def findings(self) -> list[FileResult]:
        """All results other than ``UNCHANGED``, in order."""
        return [r for r in self.results if r.is_finding]

    @property
    def is_clean(self) -> bool:
        return not self.findings

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)


def reconcile(
    manifest: Manifest,
    local_files: Iterable[str],
    root: Path,
    *,
    strict: bool = False,
    matcher: ChecksumMatcher | None = None,
) -> ReconcileResult:
    """Diff an artifact's local files against its manifest.

    Args:
        manifest: Authoritative checksums, keyed relative to ``root``.
        local_files: Relative paths of the artifact's files.
        root: Directory the relative paths are anchored at.
        strict: Also report changes to soft-change files.
        matcher: Checksum matcher (default algorithm preference if None).

    Returns:
        A ``ReconcileResult`` with deterministic ordering.
    """
    matcher = matcher or ChecksumMatcher()
    local = sorted(set(local_files))
    present = set(local)
    results: list[FileResult] = []

    for path in manifest.paths():
        if path not in present:
            results.append(FileResult(path, FileVerdict.MISSING, MSG_MISSING))

    for path in local:
        if path not in manifest:
            results.append(FileResult(path, FileVerdict.ADDED, MSG_ADDED))
            continue
        if not strict and is_soft_change(path):
            logger.debug("Skipping soft-change file %s", path)
            continue
        try:
            outcome = matcher.match(root / path, manifest.entries[path])
        except OSError as exc:
            logger.debug("Cannot read %s: %s", root / path, exc)
            results.append(FileResult(path, FileVerdict.UNREADABLE, MSG_UNREADABLE))
            continue
        verdict, message = _MATCH_VERDICTS[outcome]
        results.append(FileResult(path, verdict, message))

    return ReconcileResult(tuple(results))
