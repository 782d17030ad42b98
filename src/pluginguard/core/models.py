"""Data models for the verification engine.

Artifacts, manifests, per-file verdicts, findings, and run summaries. These
are pure data holders with no I/O, so the CLI formatters and the fetchers
can import them without pulling in the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Union

# Algorithm name -> acceptable lowercase hex digests for one file.
ChecksumSet = Mapping[str, frozenset]


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class ArtifactKind(Enum):
    """Where an artifact is installed and which manifest verifies it."""

    STANDARD = "plugin"
    MUST_USE = "must-use plugin"
    CORE_BUNDLED = "core-bundled plugin"


@dataclass(frozen=True)
class InstalledArtifact:
    """One record of the local inventory.

    Attributes:
        name: Plugin slug (e.g. "akismet"), unique within a run.
        main_file: Path of the primary file, relative to the root directory
            of the artifact's kind (e.g. "akismet/akismet.php").
        version: Version from the plugin header, or None if absent.
        kind: Installation category.
    """

    name: str
    main_file: str
    version: str | None
    kind: ArtifactKind = ArtifactKind.STANDARD

    @property
    def is_single_file(self) -> bool:
        """True when the artifact is a loose file in its root directory."""
        return "/" not in self.main_file


@dataclass(frozen=True)
class Artifact:
    """An artifact about to be verified, with its effective version."""

    name: str
    main_file: str
    version: str | None
    is_single_file: bool
    kind: ArtifactKind


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Manifest:
    """Authoritative checksums for one (artifact, version) pair.

    Attributes:
        name: Artifact slug, or "core" for a core manifest.
        version: Version the checksums were published for.
        entries: Relative file path -> checksum set. Paths are unique and
            case-sensitive.
    """

    name: str
    version: str
    entries: Mapping[str, ChecksumSet] = field(default_factory=dict)

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def paths(self) -> list[str]:
        """Return the manifest's file paths in lexicographic order."""
        return sorted(self.entries)

    def subtree(self, prefix: str, *, name: str | None = None) -> Manifest:
        """Return the entries under ``prefix``, re-keyed relative to it.

        A prefix without a trailing slash selects the single file with
        that exact path, keyed by its basename.
        """
        entries: dict[str, ChecksumSet] = {}
        if prefix.endswith("/"):
            for path, checksums in self.entries.items():
                if path.startswith(prefix) and len(path) > len(prefix):
                    entries[path[len(prefix):]] = checksums
        elif prefix in self.entries:
            entries[prefix.rsplit("/", 1)[-1]] = self.entries[prefix]
        return Manifest(name=name or self.name, version=self.version, entries=entries)


# ---------------------------------------------------------------------------
# Per-file outcomes
# ---------------------------------------------------------------------------


class MatchResult(Enum):
    """Outcome of comparing one file with one checksum set."""

    MATCH = "match"
    MISMATCH = "mismatch"
    NO_MATCHING_ALGORITHM = "no_matching_algorithm"


class FileVerdict(Enum):
    """Classification of one relative path within one artifact."""

    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    ADDED = "added"
    MISSING = "missing"
    MISSING_ALGORITHM = "missing_algorithm"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class FileResult:
    """Verdict for one file, with the message shown to the user."""

    path: str
    verdict: FileVerdict
    message: str = ""

    @property
    def is_finding(self) -> bool:
        return self.verdict is not FileVerdict.UNCHANGED


@dataclass(frozen=True)
class VerificationError:
    """A reportable finding: one file of one artifact diverges.

    This is a record, not an exception. Field names match the columns
    rendered by the CLI.
    """

    plugin_name: str
    file: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"plugin_name": self.plugin_name, "file": self.file, "message": self.message}


# ---------------------------------------------------------------------------
# Resolution outcomes
# ---------------------------------------------------------------------------


class SkipReason(Enum):
    """Why an artifact was not compared against a manifest."""

    EXCLUDED = "excluded"
    NO_VERSION = "no_version"
    MANIFEST_UNAVAILABLE = "manifest_unavailable"
    UNVERIFIABLE_LOADER = "unverifiable_loader"
    LOCAL_FILES_UNREADABLE = "local_files_unreadable"


@dataclass(frozen=True)
class Skipped:
    """An artifact that was skipped before any file comparison."""

    artifact_name: str
    reason: SkipReason
    message: str = ""


@dataclass(frozen=True)
class ResolvedArtifact:
    """Everything the reconciler needs for one artifact.

    Attributes:
        artifact: The artifact with its effective version.
        manifest: Checksums keyed relative to ``root``.
        root: Absolute directory the relative paths are anchored at.
        files: Local relative paths, sorted.
    """

    artifact: Artifact
    manifest: Manifest
    root: Path
    files: tuple[str, ...]


Resolution = Union[ResolvedArtifact, Skipped]


# ---------------------------------------------------------------------------
# Batch results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunSummary:
    """Counts over one batch run. ``total == succeeded + failed + skipped``."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    def __post_init__(self) -> None:
        if self.total != self.succeeded + self.failed + self.skipped:
            raise ValueError(
                f"Inconsistent summary: total={self.total} but "
                f"succeeded={self.succeeded}, failed={self.failed}, "
                f"skipped={self.skipped}"
            )

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1


@dataclass(frozen=True)
class ArtifactOutcome:
    """What verifying one artifact produced: findings or a skip."""

    artifact_name: str
    errors: tuple[VerificationError, ...] = ()
    skipped: Skipped | None = None


@dataclass(frozen=True)
class BatchResult:
    """The complete result of a batch run."""

    errors: tuple[VerificationError, ...]
    summary: RunSummary
    skipped: tuple[Skipped, ...] = ()

    @property
    def failed_artifacts(self) -> list[str]:
        """Distinct artifact names with findings, in first-seen order."""
        return list(dict.fromkeys(e.plugin_name for e in self.errors))
