"""WordPress.org checksum manifests.

Two endpoints are used:

- Plugin checksums, published per release::

      https://downloads.wordpress.org/plugin-checksums/<slug>/<version>.json

  ``{"files": {"<path>": {"md5": "...", "sha256": ["...", "..."]}}}``

- Core checksums, published per release and locale::

      https://api.wordpress.org/core/checksums/1.0/?version=<v>&locale=<l>

  ``{"checksums": {"<path>": "<md5>"}}``, or nested one level deeper by
  version when several versions are requested.

Usage::

    fetcher = WordPressOrgFetcher(insecure=False)
    manifest = await fetcher.fetch_plugin("akismet", "5.3")
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from pluginguard.core.models import Manifest
from pluginguard.exceptions import FetchError
from pluginguard.fetchers.base import ManifestFetcher, build_manifest
from pluginguard.fetchers.http_client import DEFAULT_TIMEOUT, fetch_json

logger = logging.getLogger(__name__)

PLUGIN_CHECKSUMS_URL: str = "https://downloads.wordpress.org/plugin-checksums/{slug}/{version}.json"
CORE_CHECKSUMS_URL: str = "https://api.wordpress.org/core/checksums/1.0/"


class WordPressOrgFetcher(ManifestFetcher):
    """Fetch manifests from the WordPress.org APIs.

    Args:
        insecure: Retry without certificate validation after a TLS failure.
        timeout: Per-request timeout in seconds.
        transport: Optional custom ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        *,
        insecure: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.insecure = insecure
        self.timeout = timeout
        self.transport = transport

    async def fetch_plugin(self, name: str, version: str) -> Manifest:
        url = PLUGIN_CHECKSUMS_URL.format(
            slug=quote(name, safe=""), version=quote(version, safe=""),
        )
        logger.debug("Fetching plugin checksums from %s", url)
        data = await fetch_json(
            url, timeout=self.timeout, insecure=self.insecure, transport=self.transport,
        )
        if not isinstance(data, dict) or not data.get("files"):
            raise FetchError(f"No checksums found for version {version} of plugin {name}.", url=url)
        return build_manifest(name, version, data["files"])

    async def fetch_core(self, version: str, locale: str) -> Manifest:
        logger.debug("Fetching core checksums for %s (%s)", version, locale)
        data = await fetch_json(
            CORE_CHECKSUMS_URL,
            params={"version": version, "locale": locale},
            timeout=self.timeout,
            insecure=self.insecure,
            transport=self.transport,
        )
        checksums = data.get("checksums") if isinstance(data, dict) else None
        if not checksums or not isinstance(checksums, dict):
            raise FetchError(
                f"No core checksums found for version {version} ({locale}).",
                url=CORE_CHECKSUMS_URL,
            )
        if isinstance(checksums.get(version), dict):
            checksums = checksums[version]
        return build_manifest("core", version, checksums)
