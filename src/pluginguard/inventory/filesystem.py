"""Filesystem inventory of a WordPress installation.

Reads the installed plugins the way WordPress itself discovers them:

- Standard plugins: ``*.php`` files directly in ``wp-content/plugins`` and
  one directory level below it that carry a ``Plugin Name`` header.
- Must-use plugins: every ``*.php`` file directly in
  ``wp-content/mu-plugins`` (WordPress loads no deeper files).
- Core version: ``$wp_version`` in ``wp-includes/version.php``.

Plugin filters are not applied, so a plugin cannot hide itself from
verification.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pluginguard.core.models import ArtifactKind, InstalledArtifact
from pluginguard.exceptions import InventoryError
from pluginguard.inventory.base import ArtifactInventory, DirectoryLister, slug_from_path
from pluginguard.inventory.headers import read_headers

logger = logging.getLogger(__name__)

# Plugins shipped inside the core package and verified against core checksums.
CORE_BUNDLED_ARTIFACTS: frozenset[str] = frozenset({"hello"})

_WP_VERSION_RE = re.compile(r"""^\s*\$wp_version\s*=\s*['"]([^'"]+)['"]\s*;""", re.MULTILINE)


class FilesystemInventory(ArtifactInventory):
    """Inventory backed by a WordPress directory tree.

    Args:
        wp_root: WordPress root directory (the one containing
            ``wp-content`` and ``wp-includes``).
        plugins_dir: Override for the plugins directory.
        mu_plugins_dir: Override for the must-use plugins directory.
    """

    def __init__(
        self,
        wp_root: Path,
        *,
        plugins_dir: Path | None = None,
        mu_plugins_dir: Path | None = None,
    ) -> None:
        self.wp_root = wp_root
        self.plugins_dir = plugins_dir or wp_root / "wp-content" / "plugins"
        self.mu_plugins_dir = mu_plugins_dir or wp_root / "wp-content" / "mu-plugins"

    def root_for(self, kind: ArtifactKind) -> Path:
        if kind is ArtifactKind.MUST_USE:
            return self.mu_plugins_dir
        return self.plugins_dir

    def list_installed(self, kind: ArtifactKind) -> list[InstalledArtifact]:
        if kind is ArtifactKind.MUST_USE:
            return self._list_must_use()
        return self._list_plugins()

    @property
    def core_version(self) -> str | None:
        version_file = self.wp_root / "wp-includes" / "version.php"
        try:
            text = version_file.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise InventoryError(f"Cannot read core version from {version_file}: {exc}") from exc
        match = _WP_VERSION_RE.search(text)
        return match.group(1) if match else None

    def plugin_directories(self) -> frozenset[str]:
        if not self.plugins_dir.is_dir():
            return frozenset()
        return frozenset(p.name for p in self.plugins_dir.iterdir() if p.is_dir())

    # -- Discovery ----------------------------------------------------------

    def _list_plugins(self) -> list[InstalledArtifact]:
        if not self.plugins_dir.is_dir():
            raise InventoryError(f"Plugin directory not found: {self.plugins_dir}")

        candidates: list[Path] = []
        for entry in self.plugins_dir.iterdir():
            if entry.is_file() and entry.suffix == ".php":
                candidates.append(entry)
            elif entry.is_dir() and not entry.name.startswith("."):
                candidates.extend(p for p in entry.glob("*.php") if p.is_file())

        records: list[InstalledArtifact] = []
        for path in candidates:
            main_file = path.relative_to(self.plugins_dir).as_posix()
            headers = self._headers(path)
            if headers is None or not headers["Name"]:
                continue
            name = slug_from_path(main_file)
            kind = ArtifactKind.STANDARD
            if name in CORE_BUNDLED_ARTIFACTS and "/" not in main_file:
                kind = ArtifactKind.CORE_BUNDLED
            records.append(InstalledArtifact(
                name=name,
                main_file=main_file,
                version=headers["Version"] or None,
                kind=kind,
            ))
        return sorted(records, key=lambda r: r.main_file)

    def _list_must_use(self) -> list[InstalledArtifact]:
        if not self.mu_plugins_dir.is_dir():
            return []
        records: list[InstalledArtifact] = []
        for path in sorted(self.mu_plugins_dir.glob("*.php")):
            if not path.is_file():
                continue
            headers = self._headers(path) or {"Version": ""}
            records.append(InstalledArtifact(
                name=slug_from_path(path.name),
                main_file=path.name,
                version=headers["Version"] or None,
                kind=ArtifactKind.MUST_USE,
            ))
        return records

    @staticmethod
    def _headers(path: Path) -> dict[str, str] | None:
        try:
            return read_headers(path)
        except OSError as exc:
            logger.warning("Cannot read plugin headers from %s: %s", path, exc)
            return None


class FilesystemLister(DirectoryLister):
    """Recursive listing of regular files, sorted by relative path."""

    def list_files(self, root: Path) -> list[str]:
        if not root.is_dir():
            return []
        return sorted(
            p.relative_to(root).as_posix()
            for p in root.rglob("*")
            if p.is_file()
        )
