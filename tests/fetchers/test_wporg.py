"""Tests for WordPressOrgFetcher and checksum document parsing."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from pluginguard.exceptions import FetchError
from pluginguard.fetchers.base import build_manifest, to_checksum_set
from pluginguard.fetchers.wporg import CORE_CHECKSUMS_URL, WordPressOrgFetcher

PLUGIN_DOC = {
    "plugin": "akismet",
    "version": "5.3",
    "files": {
        "akismet.php": {"md5": "AB12", "sha256": "cd34"},
        "readme.txt": {"md5": ["e1", "e2"], "sha256": ["f1", "f2"]},
    },
}


def _fetcher(handler) -> WordPressOrgFetcher:
    return WordPressOrgFetcher(transport=httpx.MockTransport(handler))


class TestToChecksumSet:
    """Tests for to_checksum_set."""

    def test_single_values_and_lists(self) -> None:
        assert to_checksum_set({"md5": "AB", "sha256": ["c", "D"]}) == {
            "md5": frozenset({"ab"}),
            "sha256": frozenset({"c", "d"}),
        }

    def test_bare_string_is_md5(self) -> None:
        assert to_checksum_set("ABC") == {"md5": frozenset({"abc"})}

    def test_malformed_entry(self) -> None:
        with pytest.raises(FetchError):
            to_checksum_set(42)

    def test_malformed_digest_list(self) -> None:
        with pytest.raises(FetchError):
            to_checksum_set({"md5": {"nested": "dict"}})

    def test_non_string_digest_rejected(self) -> None:
        with pytest.raises(FetchError, match="Malformed sha256"):
            to_checksum_set({"sha256": [123], "md5": ["ab"]})

    def test_build_manifest_requires_mapping(self) -> None:
        with pytest.raises(FetchError):
            build_manifest("demo", "1.0", ["not", "a", "mapping"])


class TestFetchPlugin:
    """Tests for WordPressOrgFetcher.fetch_plugin."""

    def test_parses_files(self) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=PLUGIN_DOC)

        manifest = asyncio.run(_fetcher(handler).fetch_plugin("akismet", "5.3"))

        assert requested == ["https://downloads.wordpress.org/plugin-checksums/akismet/5.3.json"]
        assert manifest.name == "akismet"
        assert manifest.version == "5.3"
        assert manifest.paths() == ["akismet.php", "readme.txt"]
        assert manifest.entries["akismet.php"]["md5"] == frozenset({"ab12"})
        assert manifest.entries["readme.txt"]["sha256"] == frozenset({"f1", "f2"})

    def test_not_found(self) -> None:
        fetcher = _fetcher(lambda request: httpx.Response(404, json={"error": "Not found"}))
        with pytest.raises(FetchError):
            asyncio.run(fetcher.fetch_plugin("akismet", "0.0"))

    def test_missing_files_key(self) -> None:
        fetcher = _fetcher(lambda request: httpx.Response(200, json={"plugin": "akismet"}))
        with pytest.raises(FetchError, match="No checksums"):
            asyncio.run(fetcher.fetch_plugin("akismet", "5.3"))


class TestFetchCore:
    """Tests for WordPressOrgFetcher.fetch_core."""

    def test_flat_checksums(self) -> None:
        params: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            params.append(dict(request.url.params))
            assert str(request.url).startswith(CORE_CHECKSUMS_URL)
            return httpx.Response(200, json={"checksums": {"wp-content/plugins/hello.php": "AA"}})

        manifest = asyncio.run(_fetcher(handler).fetch_core("6.4.2", "en_US"))

        assert params == [{"version": "6.4.2", "locale": "en_US"}]
        assert manifest.entries == {"wp-content/plugins/hello.php": {"md5": frozenset({"aa"})}}

    def test_nested_by_version(self) -> None:
        doc = {"checksums": {"6.4.2": {"index.php": "bb"}}}
        manifest = asyncio.run(_fetcher(lambda request: httpx.Response(200, json=doc)).fetch_core("6.4.2", "en_US"))
        assert manifest.paths() == ["index.php"]

    def test_false_checksums(self) -> None:
        fetcher = _fetcher(lambda request: httpx.Response(200, json={"checksums": False}))
        with pytest.raises(FetchError):
            asyncio.run(fetcher.fetch_core("0.1", "en_US"))
