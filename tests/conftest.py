"""Shared fixtures for pluginguard tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import AKISMET_CLASS, AKISMET_MAIN, AKISMET_README, HELLO_MAIN, make_wp_tree


@pytest.fixture
def wp_root(tmp_path: Path) -> Path:
    """A WordPress tree with Akismet, Hello Dolly, and one must-use loader."""
    return make_wp_tree(
        tmp_path / "wordpress",
        plugins={
            "akismet/akismet.php": AKISMET_MAIN,
            "akismet/class.akismet.php": AKISMET_CLASS,
            "akismet/readme.txt": AKISMET_README,
            "hello.php": HELLO_MAIN,
        },
        mu_plugins={
            "loader.php": b"<?php\nrequire WPMU_PLUGIN_DIR . '/custom/custom.php';\n",
        },
    )
