"""Retrieval of authoritative checksum manifests.

Public API::

    from pluginguard.fetchers import ManifestFetcher, WordPressOrgFetcher
"""

from __future__ import annotations

from pluginguard.fetchers.base import ManifestFetcher, build_manifest, to_checksum_set
from pluginguard.fetchers.wporg import WordPressOrgFetcher

__all__ = [
    "ManifestFetcher",
    "WordPressOrgFetcher",
    "build_manifest",
    "to_checksum_set",
]
