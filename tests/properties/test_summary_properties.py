"""Property-based tests for batch aggregation and file reconciliation.

Verifies that:
- Every merged summary satisfies total == succeeded + failed + skipped.
- ``failed`` counts distinct plugins, not findings.
- Reconciliation covers each path exactly once, independent of input order.
"""
from __future__ import annotations

import hashlib
import tempfile
from pathlib import Path

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from pluginguard.core.batch import merge_outcomes
from pluginguard.core.models import (
    ArtifactOutcome,
    FileVerdict,
    SkipReason,
    Skipped,
    VerificationError,
)
from pluginguard.core.reconciler import reconcile
from pluginguard.fetchers.base import build_manifest


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

plugin_names = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz-"),
    min_size=1,
    max_size=12,
)

file_names = st.from_regex(r"[a-z]{1,8}(/[a-z]{1,8})?\.php", fullmatch=True)


@st.composite
def outcomes(draw: st.DrawFn) -> ArtifactOutcome:
    name = draw(plugin_names)
    kind = draw(st.sampled_from(["clean", "failed", "skipped"]))
    if kind == "skipped":
        reason = draw(st.sampled_from(list(SkipReason)))
        return ArtifactOutcome(name, skipped=Skipped(name, reason))
    if kind == "failed":
        files = draw(st.lists(file_names, min_size=1, max_size=4))
        return ArtifactOutcome(
            name, errors=tuple(VerificationError(name, f, "File was added") for f in files),
        )
    return ArtifactOutcome(name)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestSummaryInvariant:
    """Counts always add up."""

    @given(st.lists(outcomes(), max_size=15, unique_by=lambda o: o.artifact_name))
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_counts_add_up(self, items: list[ArtifactOutcome]) -> None:
        summary = merge_outcomes(items).summary
        assert summary.total == len(items)
        assert summary.total == summary.succeeded + summary.failed + summary.skipped

    @given(st.lists(outcomes(), max_size=15, unique_by=lambda o: o.artifact_name))
    def test_failed_counts_plugins_with_errors(self, items: list[ArtifactOutcome]) -> None:
        result = merge_outcomes(items)
        assert result.summary.failed == sum(1 for o in items if o.errors)
        assert result.summary.exit_code == (1 if result.summary.failed else 0)

    @given(st.lists(outcomes(), max_size=15, unique_by=lambda o: o.artifact_name))
    def test_errors_keep_processing_order(self, items: list[ArtifactOutcome]) -> None:
        expected = [e for o in items for e in o.errors]
        assert list(merge_outcomes(items).errors) == expected


class TestReconcileCoverage:
    """Each path gets exactly one verdict."""

    @given(
        manifest_paths=st.sets(file_names, max_size=8),
        local_paths=st.sets(file_names, max_size=8),
    )
    @settings(max_examples=50, deadline=None)
    def test_every_path_once_in_canonical_order(
        self, manifest_paths: set[str], local_paths: set[str]
    ) -> None:
        content = b"<?php\n"
        digest = hashlib.sha256(content).hexdigest()
        manifest = build_manifest("demo", "1.0", {p: {"sha256": digest} for p in manifest_paths})

        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for rel in local_paths:
                (root / rel).parent.mkdir(parents=True, exist_ok=True)
                (root / rel).write_bytes(content)

            forward = reconcile(manifest, sorted(local_paths), root)
            backward = reconcile(manifest, sorted(local_paths, reverse=True), root)

        assert forward == backward
        paths = [r.path for r in forward]
        assert sorted(paths) == sorted(manifest_paths | local_paths)

        missing = sorted(manifest_paths - local_paths)
        assert paths[: len(missing)] == missing
        assert all(r.verdict is FileVerdict.MISSING for r in forward.results[: len(missing)])
        assert {r.path for r in forward if r.verdict is FileVerdict.ADDED} == local_paths - manifest_paths
        assert {r.path for r in forward if r.verdict is FileVerdict.UNCHANGED} == (
            local_paths & manifest_paths
        )
