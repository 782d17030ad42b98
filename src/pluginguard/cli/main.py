"""PluginGuard CLI: Checksum verification for installed WordPress plugins.

Entry point for the ``pluginguard`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    verify: Verify plugin files against WordPress.org checksums.

Usage::

    pluginguard verify --all --path /var/www/html
    pluginguard verify akismet --strict
    pluginguard verify akismet --version 5.3 --format json
    pluginguard verify --all --exclude hello,akismet --exclude-mu-plugins
"""

from __future__ import annotations

import logging

import click

from pluginguard import __version__
from pluginguard.cli.verify import verify_command


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Log engine activity to stderr.")
def cli(debug: bool) -> None:
    """PluginGuard: Checksum verification for installed WordPress plugins.

    Compare installed plugin files with the checksums published for their
    version and report every added, removed, or modified file.
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


cli.add_command(verify_command)
