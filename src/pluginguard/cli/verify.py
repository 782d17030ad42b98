"""``pluginguard verify [<plugin>...]``: Verify plugin files against published checksums.

Reads the installed plugins of a WordPress tree, downloads the checksums
WordPress.org published for each installed version, and reports every file
that was added, removed, or modified.

Exit Codes:
    0: No plugin has findings (skipped plugins do not count as failures).
    1: At least one plugin has findings, or the installation is unreadable.
    2: Usage error (no plugin named and ``--all`` not given).
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from pluginguard.core import ArtifactResolver, BatchVerifier, DEFAULT_LOCALE, VerifyOptions
from pluginguard.exceptions import InventoryError, NoArtifactsSpecifiedError
from pluginguard.fetchers import WordPressOrgFetcher
from pluginguard.inventory import FilesystemInventory, FilesystemLister
from pluginguard.cli.output import OUTPUT_FORMATS, render_errors, report_batch_results, warn

logger = logging.getLogger(__name__)


def _parse_exclude(exclude: str) -> frozenset[str]:
    """Split a comma separated ``--exclude`` value into names."""
    return frozenset(name.strip() for name in exclude.split(",") if name.strip())


def _build_verifier(
    wp_path: Path,
    *,
    insecure: bool,
    locale: str,
    concurrency: int,
) -> BatchVerifier:
    """Wire the filesystem inventory and WordPress.org fetcher together.

    Raises:
        InventoryError: If the WordPress tree cannot be read.
    """
    snapshot = FilesystemInventory(wp_path).snapshot()
    fetcher = WordPressOrgFetcher(insecure=insecure)
    resolver = ArtifactResolver(snapshot, fetcher, FilesystemLister(), locale=locale)
    return BatchVerifier(snapshot, resolver, on_warning=warn, concurrency=concurrency)


@click.command("verify")
@click.argument("plugins", nargs=-1)
@click.option("--all", "verify_all", is_flag=True, help="Verify all installed plugins.")
@click.option(
    "--strict", is_flag=True,
    help='Also report "soft changes" such as readme.txt edits.',
)
@click.option(
    "--version", "version_override", default="",
    help="Verify checksums against a specific plugin version.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    default="table",
    help="Output format for findings (default: table).",
)
@click.option(
    "--insecure", is_flag=True,
    help="Retry downloads without certificate validation if the TLS handshake fails.",
)
@click.option(
    "--exclude", default="",
    help="Comma separated list of plugin names to exclude from verification.",
)
@click.option(
    "--exclude-mu-plugins", "exclude_mu", is_flag=True,
    help="Exclude must-use plugins from verification.",
)
@click.option(
    "--path", "wp_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    envvar="PLUGINGUARD_PATH",
    show_default=True,
    help="WordPress root directory.",
)
@click.option(
    "--locale", default=DEFAULT_LOCALE, envvar="PLUGINGUARD_LOCALE", show_default=True,
    help="Core locale used to verify core-bundled plugins.",
)
@click.option(
    "--concurrency", type=click.IntRange(min=1), default=1, show_default=True,
    help="Number of plugins verified in parallel.",
)
def verify_command(
    plugins: tuple[str, ...],
    verify_all: bool,
    strict: bool,
    version_override: str,
    output_format: str,
    insecure: bool,
    exclude: str,
    exclude_mu: bool,
    wp_path: Path,
    locale: str,
    concurrency: int,
) -> None:
    """Verify plugin files against WordPress.org's checksums.

    Checks each PLUGIN (or every installed plugin with --all) plus the
    must-use plugins, and lists files that were added, removed, or modified.

    Exit code 0 if no plugin has findings, 1 otherwise.
    """
    if insecure:
        logger.warning("TLS certificate validation may be disabled for checksum downloads.")

    try:
        verifier = _build_verifier(
            wp_path, insecure=insecure, locale=locale, concurrency=concurrency,
        )
    except InventoryError as exc:
        raise click.ClickException(str(exc)) from exc

    options = VerifyOptions(
        all=verify_all,
        strict=strict,
        exclude=_parse_exclude(exclude),
        exclude_must_use=exclude_mu,
        version_override=version_override,
    )
    try:
        result = asyncio.run(verifier.verify(plugins, options))
    except NoArtifactsSpecifiedError as exc:
        raise click.UsageError(str(exc)) from exc

    if result.errors:
        render_errors(result.errors, output_format)
    report_batch_results(result.summary)
    sys.exit(result.summary.exit_code)
