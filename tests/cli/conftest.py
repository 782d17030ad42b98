"""Shared fixtures for CLI tests.

The ``verify`` command builds its own ``WordPressOrgFetcher``; these
fixtures replace it with an in-memory ``FakeFetcher`` serving manifests
that match the ``wp_root`` tree, so no test reaches the network.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from pluginguard.fetchers.base import build_manifest
from tests.helpers import (
    AKISMET_CLASS,
    AKISMET_MAIN,
    AKISMET_README,
    HELLO_MAIN,
    FakeFetcher,
    manifest_for,
    md5,
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Manifests matching the pristine ``wp_root`` tree."""
    return FakeFetcher(
        plugins={
            ("akismet", "5.3"): manifest_for("akismet", "5.3", {
                "akismet.php": AKISMET_MAIN,
                "class.akismet.php": AKISMET_CLASS,
                "readme.txt": AKISMET_README,
            }),
        },
        core={
            ("6.4.2", "en_US"): build_manifest("core", "6.4.2", {
                "wp-includes/version.php": "0" * 32,
                "wp-content/plugins/hello.php": md5(HELLO_MAIN),
            }),
        },
    )


@pytest.fixture
def fetcher_options(monkeypatch: pytest.MonkeyPatch, fake_fetcher: FakeFetcher) -> list[dict]:
    """Route the command's fetcher to ``fake_fetcher``.

    Returns the keyword arguments of every fetcher the command created.
    """
    created: list[dict] = []

    def factory(**kwargs) -> FakeFetcher:
        created.append(kwargs)
        return fake_fetcher

    monkeypatch.setattr("pluginguard.cli.verify.WordPressOrgFetcher", factory)
    return created


@pytest.fixture
def invoke(runner: CliRunner, wp_root: Path, fetcher_options: list[dict]):
    """Invoke ``pluginguard verify`` against ``wp_root``."""
    from pluginguard.cli.main import cli

    def _invoke(*args: str, **kwargs):
        return runner.invoke(cli, ["verify", "--path", str(wp_root), *args], **kwargs)

    return _invoke
