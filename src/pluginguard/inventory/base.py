"""Inventory and directory-listing interfaces.

The verification engine never walks the WordPress tree itself. It consumes
an ``InventorySnapshot``, an immutable view of the installed plugins
read once per run, and a ``DirectoryLister`` that enumerates an
artifact's files. Concrete filesystem implementations live in
``pluginguard.inventory.filesystem``.
"""

from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from pluginguard.core.models import ArtifactKind, InstalledArtifact

logger = logging.getLogger(__name__)


def slug_from_path(main_file: str) -> str:
    """Derive a plugin slug from the path of its main file.

    ``akismet/akismet.php`` -> ``akismet``; ``hello.php`` -> ``hello``.
    """
    if "/" in main_file:
        return posixpath.dirname(main_file)
    name = posixpath.basename(main_file)
    return name[:-4] if name.endswith(".php") else name


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InventorySnapshot:
    """Installed plugins as seen at the start of a run.

    Attributes:
        plugins: Standard and core-bundled plugins, ordered by main file.
        must_use: Must-use plugins, ordered by main file.
        roots: Root directory per artifact kind.
        core_version: Version of the installed core, if known.
        plugin_directories: Names of all directories in the plugins root,
            including ones whose main file is missing.
    """

    plugins: tuple[InstalledArtifact, ...] = ()
    must_use: tuple[InstalledArtifact, ...] = ()
    roots: Mapping[ArtifactKind, Path] = field(default_factory=dict)
    core_version: str | None = None
    plugin_directories: frozenset[str] = frozenset()

    def root_for(self, kind: ArtifactKind) -> Path:
        try:
            return self.roots[kind]
        except KeyError:
            if kind is ArtifactKind.CORE_BUNDLED and ArtifactKind.STANDARD in self.roots:
                return self.roots[ArtifactKind.STANDARD]
            raise

    def lookup_version(self, main_file: str) -> str | None:
        """Return the header version of the plugin with this main file."""
        for record in self.plugins:
            if record.main_file == main_file:
                return record.version
        return None

    def all_plugin_names(self) -> list[str]:
        return [record.name for record in self.plugins]

    def find(self, name: str) -> InstalledArtifact | None:
        """Look up a plugin by slug, main file, or directory name.

        Plugins cannot hide themselves from this lookup: a directory in the
        plugins root that has no readable main file still resolves, using
        the conventional ``<name>/<name>.php`` main file, so its contents
        can be verified.
        """
        for record in self.plugins:
            main = record.main_file
            if main == f"{name}.php" or (name and main == name):
                return record
            if name and name != "." and posixpath.dirname(main) == name:
                return record
        if name in self.plugin_directories:
            return InstalledArtifact(
                name=name,
                main_file=f"{name}/{name}.php",
                version=None,
                kind=ArtifactKind.STANDARD,
            )
        return None


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


class ArtifactInventory(ABC):
    """Source of installed-plugin metadata."""

    @abstractmethod
    def list_installed(self, kind: ArtifactKind) -> list[InstalledArtifact]:
        """List installed artifacts of one kind, ordered by main file.

        ``STANDARD`` includes core-bundled plugins, which live in the same
        directory.
        """

    @abstractmethod
    def root_for(self, kind: ArtifactKind) -> Path:
        """Directory that artifacts of ``kind`` are installed in."""

    @property
    @abstractmethod
    def core_version(self) -> str | None:
        """Version of the installed core, or None if unknown."""

    def plugin_directories(self) -> frozenset[str]:
        """Names of the directories in the plugins root."""
        return frozenset()

    def snapshot(self) -> InventorySnapshot:
        """Read the whole inventory once."""
        plugins = tuple(self.list_installed(ArtifactKind.STANDARD))
        must_use = tuple(self.list_installed(ArtifactKind.MUST_USE))
        logger.debug(
            "Inventory: %d plugins, %d must-use plugins", len(plugins), len(must_use)
        )
        return InventorySnapshot(
            plugins=plugins,
            must_use=must_use,
            roots={
                ArtifactKind.STANDARD: self.root_for(ArtifactKind.STANDARD),
                ArtifactKind.MUST_USE: self.root_for(ArtifactKind.MUST_USE),
                ArtifactKind.CORE_BUNDLED: self.root_for(ArtifactKind.CORE_BUNDLED),
            },
            core_version=self.core_version,
            plugin_directories=self.plugin_directories(),
        )


class DirectoryLister(ABC):
    """Enumerates the files below a directory."""

    @abstractmethod
    def list_files(self, root: Path) -> list[str]:
        """Return sorted POSIX paths of all regular files below ``root``,
        relative to it."""
