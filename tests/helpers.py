"""Shared test helpers: digests, fake fetchers, and fake WordPress trees.

``FakeFetcher`` serves manifests from memory so engine tests never touch
the network. ``make_wp_tree`` builds a minimal but realistic WordPress
directory layout under a temporary directory.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from pluginguard.core.models import Manifest
from pluginguard.exceptions import FetchError
from pluginguard.fetchers.base import ManifestFetcher, build_manifest


def sha256(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def md5(content: bytes) -> str:
    return hashlib.md5(content).hexdigest()


def manifest_for(name: str, version: str, files: dict[str, bytes]) -> Manifest:
    """Build a manifest whose entries match ``files`` exactly (sha256 + md5)."""
    return build_manifest(name, version, {
        path: {"sha256": sha256(content), "md5": [md5(content)]}
        for path, content in files.items()
    })


class FakeFetcher(ManifestFetcher):
    """In-memory manifest source.

    Args:
        plugins: ``(name, version) -> Manifest``. Missing keys raise
            ``FetchError``.
        core: ``(version, locale) -> Manifest``.
    """

    def __init__(
        self,
        plugins: dict[tuple[str, str], Manifest] | None = None,
        core: dict[tuple[str, str], Manifest] | None = None,
    ) -> None:
        self.plugins = plugins or {}
        self.core = core or {}
        self.calls: list[tuple[str, ...]] = []

    async def fetch_plugin(self, name: str, version: str) -> Manifest:
        self.calls.append(("plugin", name, version))
        try:
            return self.plugins[(name, version)]
        except KeyError:
            raise FetchError(f"HTTP 404 for {name} {version}", status_code=404) from None

    async def fetch_core(self, version: str, locale: str) -> Manifest:
        self.calls.append(("core", version, locale))
        try:
            return self.core[(version, locale)]
        except KeyError:
            raise FetchError(f"HTTP 404 for core {version} {locale}", status_code=404) from None


def plugin_header(name: str, version: str | None = None) -> bytes:
    """Return the PHP header block of a plugin main file."""
    lines = ["<?php", "/**", f" * Plugin Name: {name}"]
    if version is not None:
        lines.append(f" * Version: {version}")
    lines.extend([" */", ""])
    return "\n".join(lines).encode()


def write_files(root: Path, files: dict[str, bytes]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def make_wp_tree(
    root: Path,
    *,
    plugins: dict[str, bytes] | None = None,
    mu_plugins: dict[str, bytes] | None = None,
    core_version: str | None = "6.4.2",
) -> Path:
    """Create a WordPress tree with the given plugin files.

    Args:
        root: WordPress root to create.
        plugins: Paths relative to ``wp-content/plugins`` -> content.
        mu_plugins: Paths relative to ``wp-content/mu-plugins`` -> content.
        core_version: Value written to ``wp-includes/version.php``.

    Returns:
        The WordPress root.
    """
    plugins_dir = root / "wp-content" / "plugins"
    plugins_dir.mkdir(parents=True, exist_ok=True)
    write_files(plugins_dir, plugins or {})
    if mu_plugins is not None:
        mu_dir = root / "wp-content" / "mu-plugins"
        mu_dir.mkdir(parents=True, exist_ok=True)
        write_files(mu_dir, mu_plugins)
    if core_version is not None:
        write_files(root, {
            "wp-includes/version.php": (
                f"<?php\n$wp_version = '{core_version}';\n$wp_db_version = 56657;\n"
            ).encode(),
        })
    return root


AKISMET_MAIN = plugin_header("Akismet Anti-spam", "5.3") + b"require 'class.akismet.php';\n"
AKISMET_CLASS = b"<?php\nclass Akismet {}\n"
AKISMET_README = b"=== Akismet ===\nStable tag: 5.3\n"
HELLO_MAIN = plugin_header("Hello Dolly", "1.7.2") + b"function hello_dolly() {}\n"
