"""Artifact resolution: version, manifest, and local file set.

For one inventory record, the resolver decides which version to verify
against, retrieves the matching manifest, and lists the local files. Any
condition that prevents a comparison is returned as a ``Skipped`` value,
never raised: skips are warnings, not failures.

The three artifact kinds differ only in a few places, handled by one
dispatch on ``ArtifactKind``:

=============  =====================  ==================  =====================
Kind           Version source         Manifest            On fetch failure
=============  =====================  ==================  =====================
STANDARD       override / inventory   plugin (name, ver)  manifest unavailable
MUST_USE       override / header      plugin (name, ver)  loader if single file
CORE_BUNDLED   core version           core (ver, locale)  manifest unavailable
=============  =====================  ==================  =====================
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING

from pluginguard.core.models import (
    Artifact,
    ArtifactKind,
    InstalledArtifact,
    Manifest,
    Resolution,
    ResolvedArtifact,
    SkipReason,
    Skipped,
)
from pluginguard.exceptions import FetchError

if TYPE_CHECKING:
    from pluginguard.fetchers.base import ManifestFetcher
    from pluginguard.inventory.base import DirectoryLister, InventorySnapshot

logger = logging.getLogger(__name__)

DEFAULT_LOCALE: str = "en_US"

# Where core-bundled plugins sit inside the core manifest.
CORE_PLUGIN_PREFIX: str = "wp-content/plugins/"


class ArtifactResolver:
    """Resolve inventory records into verifiable artifacts.

    Args:
        snapshot: Inventory read at the start of the run.
        fetcher: Source of checksum manifests.
        lister: Directory lister for multi-file artifacts.
        locale: Core locale used for core-bundled artifacts.
    """

    def __init__(
        self,
        snapshot: InventorySnapshot,
        fetcher: ManifestFetcher,
        lister: DirectoryLister,
        *,
        locale: str | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.fetcher = fetcher
        self.lister = lister
        self.locale = locale or DEFAULT_LOCALE

    async def resolve(self, record: InstalledArtifact, version_override: str = "") -> Resolution:
        """Resolve one artifact.

        Args:
            record: Inventory record of the artifact.
            version_override: Version to verify against instead of the
                installed one. Ignored for core-bundled artifacts.

        Returns:
            ``ResolvedArtifact`` ready for reconciliation, or ``Skipped``.
        """
        kind = record.kind
        if kind is ArtifactKind.STANDARD:
            return await self._resolve_plugin(record, version_override)
        if kind is ArtifactKind.MUST_USE:
            return await self._resolve_must_use(record, version_override)
        if kind is ArtifactKind.CORE_BUNDLED:
            return await self._resolve_core_bundled(record)
        raise ValueError(f"Unknown artifact kind: {kind!r}")

    # -- Per-kind resolution ------------------------------------------------

    async def _resolve_plugin(self, record: InstalledArtifact, version_override: str) -> Resolution:
        version = version_override or self.snapshot.lookup_version(record.main_file)
        if not version:
            return Skipped(
                record.name,
                SkipReason.NO_VERSION,
                f"Could not retrieve the version for plugin {record.name}, skipping.",
            )
        try:
            manifest = await self.fetcher.fetch_plugin(record.name, version)
        except FetchError as exc:
            logger.warning("Manifest for %s %s unavailable: %s", record.name, version, exc)
            return Skipped(
                record.name,
                SkipReason.MANIFEST_UNAVAILABLE,
                f"Could not retrieve the checksums for version {version} "
                f"of plugin {record.name}, skipping.",
            )
        return self._resolved(record, version, manifest)

    async def _resolve_must_use(self, record: InstalledArtifact, version_override: str) -> Resolution:
        version = version_override or record.version
        if not version:
            return Skipped(
                record.name,
                SkipReason.NO_VERSION,
                f"Could not retrieve the version for must-use plugin {record.name}, skipping.",
            )
        try:
            manifest = await self.fetcher.fetch_plugin(record.name, version)
        except FetchError as exc:
            logger.warning("Manifest for %s %s unavailable: %s", record.name, version, exc)
            if record.is_single_file:
                return Skipped(
                    record.name,
                    SkipReason.UNVERIFIABLE_LOADER,
                    f"Must-use plugin '{record.main_file}' appears to be a custom "
                    "file or loader plugin and cannot be verified.",
                )
            return Skipped(
                record.name,
                SkipReason.MANIFEST_UNAVAILABLE,
                f"Could not retrieve the checksums for version {version} "
                f"of must-use plugin {record.name}, skipping.",
            )
        return self._resolved(record, version, manifest)

    async def _resolve_core_bundled(self, record: InstalledArtifact) -> Resolution:
        core_version = self.snapshot.core_version
        if not core_version:
            return Skipped(
                record.name,
                SkipReason.NO_VERSION,
                f"Could not retrieve the core version to verify plugin {record.name}, skipping.",
            )
        try:
            core = await self.fetcher.fetch_core(core_version, self.locale)
        except FetchError as exc:
            logger.warning("Core manifest %s (%s) unavailable: %s", core_version, self.locale, exc)
            return Skipped(
                record.name,
                SkipReason.MANIFEST_UNAVAILABLE,
                f"Could not retrieve the core checksums for version {core_version} "
                f"to verify plugin {record.name}, skipping.",
            )
        if record.is_single_file:
            prefix = CORE_PLUGIN_PREFIX + record.main_file
        else:
            prefix = CORE_PLUGIN_PREFIX + posixpath.dirname(record.main_file) + "/"
        manifest = core.subtree(prefix, name=record.name)
        if not manifest.entries:
            return Skipped(
                record.name,
                SkipReason.MANIFEST_UNAVAILABLE,
                f"Could not find {record.main_file} in the core checksums "
                f"for version {core_version}, skipping.",
            )
        return self._resolved(record, core_version, manifest)

    # -- Local files --------------------------------------------------------

    def _resolved(self, record: InstalledArtifact, version: str, manifest: Manifest) -> Resolution:
        artifact = Artifact(
            name=record.name,
            main_file=record.main_file,
            version=version,
            is_single_file=record.is_single_file,
            kind=record.kind,
        )
        base = self.snapshot.root_for(record.kind)
        if artifact.is_single_file:
            root = base
            files: tuple[str, ...] = (posixpath.basename(record.main_file),)
        else:
            root = base / posixpath.dirname(record.main_file)
            try:
                files = tuple(self.lister.list_files(root))
            except OSError as exc:
                logger.warning("Cannot list files of %s in %s: %s", record.name, root, exc)
                return Skipped(
                    record.name,
                    SkipReason.LOCAL_FILES_UNREADABLE,
                    f"Could not read the files of plugin {record.name}, skipping.",
                )
        logger.debug(
            "Resolved %s %s: %d local files, %d manifest entries",
            artifact.name, version, len(files), len(manifest),
        )
        return ResolvedArtifact(artifact=artifact, manifest=manifest, root=root, files=files)
