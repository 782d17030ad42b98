"""Verification engine: matching, reconciliation, resolution, batching.

The package is split into focused submodules:

- ``models``: data classes and enums shared by every layer.
- ``matcher``: one file against one checksum set.
- ``soft_change``: files only reported in strict mode.
- ``reconciler``: one artifact's files against its manifest.
- ``resolver``: version, manifest, and file list for one artifact.
- ``batch``: orchestration and aggregation across artifacts.
"""

from pluginguard.core.models import (
    Artifact,
    ArtifactKind,
    ArtifactOutcome,
    BatchResult,
    ChecksumSet,
    FileResult,
    FileVerdict,
    InstalledArtifact,
    Manifest,
    MatchResult,
    ResolvedArtifact,
    RunSummary,
    SkipReason,
    Skipped,
    VerificationError,
)
from pluginguard.core.matcher import SUPPORTED_ALGORITHMS, ChecksumMatcher, match_file
from pluginguard.core.soft_change import SOFT_CHANGE_FILES, is_soft_change
from pluginguard.core.reconciler import ReconcileResult, reconcile
from pluginguard.core.resolver import DEFAULT_LOCALE, ArtifactResolver
from pluginguard.core.batch import BatchVerifier, VerifyOptions, merge_outcomes

__all__ = [
    "Artifact",
    "ArtifactKind",
    "ArtifactOutcome",
    "ArtifactResolver",
    "BatchResult",
    "BatchVerifier",
    "ChecksumMatcher",
    "ChecksumSet",
    "DEFAULT_LOCALE",
    "FileResult",
    "FileVerdict",
    "InstalledArtifact",
    "Manifest",
    "MatchResult",
    "ReconcileResult",
    "ResolvedArtifact",
    "RunSummary",
    "SOFT_CHANGE_FILES",
    "SUPPORTED_ALGORITHMS",
    "SkipReason",
    "Skipped",
    "VerificationError",
    "VerifyOptions",
    "is_soft_change",
    "match_file",
    "merge_outcomes",
    "reconcile",
]
