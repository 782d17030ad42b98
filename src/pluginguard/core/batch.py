"""Batch verification across many artifacts.

The batch verifier selects the artifacts to check, resolves and reconciles
each one, and merges the per-artifact outcomes into a flat error list and a
``RunSummary``. It is a best-effort job: one artifact's failure never stops
the others, and skipped artifacts are reported as warnings as soon as they
happen.

Usage::

    verifier = BatchVerifier(snapshot, resolver, on_warning=print)
    result = asyncio.run(verifier.verify([], VerifyOptions(all=True)))
    print(result.summary)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable

from pluginguard.core.matcher import ChecksumMatcher
from pluginguard.core.models import (
    ArtifactOutcome,
    BatchResult,
    InstalledArtifact,
    RunSummary,
    SkipReason,
    Skipped,
    VerificationError,
)
from pluginguard.core.reconciler import reconcile
from pluginguard.exceptions import NoArtifactsSpecifiedError

if TYPE_CHECKING:
    from pluginguard.core.resolver import ArtifactResolver
    from pluginguard.inventory.base import InventorySnapshot

logger = logging.getLogger(__name__)

NO_ARTIFACTS_MESSAGE = (
    "You need to specify either one or more plugin slugs to check "
    "or use the --all flag to check all plugins."
)


@dataclass(frozen=True)
class VerifyOptions:
    """Options of one batch run.

    Attributes:
        all: Verify every installed plugin (requested names are ignored).
        strict: Also report changes to soft-change files such as readmes.
        exclude: Plugin names to skip before resolution.
        exclude_must_use: Skip must-use plugins entirely.
        version_override: Verify against this version instead of the
            installed one.
    """

    all: bool = False
    strict: bool = False
    exclude: frozenset[str] = frozenset()
    exclude_must_use: bool = False
    version_override: str = ""


class BatchVerifier:
    """Verify a set of installed artifacts against their manifests.

    Args:
        snapshot: Inventory read once at the start of the run.
        resolver: Resolves records into manifests and file lists.
        matcher: Checksum matcher passed to the reconciler.
        on_warning: Called with each warning message as it occurs.
        concurrency: Number of artifacts processed at once. Results are
            merged in selection order regardless of completion order.
    """

    def __init__(
        self,
        snapshot: InventorySnapshot,
        resolver: ArtifactResolver,
        *,
        matcher: ChecksumMatcher | None = None,
        on_warning: Callable[[str], None] | None = None,
        concurrency: int = 1,
    ) -> None:
        self.snapshot = snapshot
        self.resolver = resolver
        self.matcher = matcher or ChecksumMatcher()
        self.on_warning = on_warning or (lambda message: None)
        self.concurrency = max(1, concurrency)

    # -- Selection ----------------------------------------------------------

    def select(
        self, requested_names: Iterable[str], options: VerifyOptions
    ) -> tuple[list[InstalledArtifact], list[InstalledArtifact]]:
        """Pick the primary and must-use artifacts to verify.

        The must-use list follows every run unless
        ``options.exclude_must_use`` is set; naming a must-use plugin
        only marks the name as known.

        Raises:
            NoArtifactsSpecifiedError: If nothing was requested and
                ``options.all`` is not set, or none of the requested names
                is installed.
        """
        names = list(dict.fromkeys(requested_names))
        if not names and not options.all:
            raise NoArtifactsSpecifiedError(NO_ARTIFACTS_MESSAGE)

        must_use = [] if options.exclude_must_use else list(self.snapshot.must_use)
        if options.all:
            return list(self.snapshot.plugins), must_use

        must_use_names = {record.name for record in self.snapshot.must_use}
        selected: dict[str, InstalledArtifact] = {}
        named_must_use = False
        for name in names:
            record = self.snapshot.find(name)
            if record is not None:
                selected.setdefault(record.main_file, record)
            elif name in must_use_names:
                named_must_use = True
            else:
                self.on_warning(f"The '{name}' plugin could not be found.")

        if not selected and not (named_must_use and must_use):
            raise NoArtifactsSpecifiedError(NO_ARTIFACTS_MESSAGE)
        return list(selected.values()), must_use

    # -- Verification -------------------------------------------------------

    async def verify_artifact(self, record: InstalledArtifact, options: VerifyOptions) -> ArtifactOutcome:
        """Verify one artifact and return its findings or skip."""
        if record.name in options.exclude:
            logger.debug("Excluded %s", record.name)
            return ArtifactOutcome(record.name, skipped=Skipped(record.name, SkipReason.EXCLUDED))

        resolution = await self.resolver.resolve(record, options.version_override)
        if isinstance(resolution, Skipped):
            if resolution.message:
                self.on_warning(resolution.message)
            return ArtifactOutcome(record.name, skipped=resolution)

        result = reconcile(
            resolution.manifest,
            resolution.files,
            resolution.root,
            strict=options.strict,
            matcher=self.matcher,
        )
        errors = tuple(
            VerificationError(record.name, finding.path, finding.message)
            for finding in result.findings
        )
        logger.debug("Verified %s: %d findings", record.name, len(errors))
        return ArtifactOutcome(record.name, errors=errors)

    async def verify(self, requested_names: Iterable[str], options: VerifyOptions) -> BatchResult:
        """Verify the requested artifacts and aggregate the results.

        Args:
            requested_names: Plugin slugs to verify (ignored with ``all``).
            options: Run options.

        Returns:
            ``BatchResult`` with errors in processing order and a summary
            satisfying ``total == succeeded + failed + skipped``.

        Raises:
            NoArtifactsSpecifiedError: If nothing was requested and
                ``options.all`` is not set.
        """
        primary, must_use = self.select(requested_names, options)
        records = primary + must_use

        if self.concurrency == 1:
            outcomes = [await self.verify_artifact(record, options) for record in records]
        else:
            semaphore = asyncio.Semaphore(self.concurrency)

            async def _bounded(record: InstalledArtifact) -> ArtifactOutcome:
                async with semaphore:
                    return await self.verify_artifact(record, options)

            outcomes = list(await asyncio.gather(*(_bounded(r) for r in records)))

        return merge_outcomes(outcomes)


def merge_outcomes(outcomes: Iterable[ArtifactOutcome]) -> BatchResult:
    """Merge per-artifact outcomes into a ``BatchResult``.

    ``failed`` counts distinct artifact names with at least one error.
    """
    outcomes = list(outcomes)
    errors = tuple(error for outcome in outcomes for error in outcome.errors)
    skipped = tuple(outcome.skipped for outcome in outcomes if outcome.skipped is not None)
    total = len(outcomes)
    failed = len({error.plugin_name for error in errors})
    summary = RunSummary(
        total=total,
        succeeded=total - failed - len(skipped),
        failed=failed,
        skipped=len(skipped),
    )
    return BatchResult(errors=errors, summary=summary, skipped=skipped)
