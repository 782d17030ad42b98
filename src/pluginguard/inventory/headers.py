"""Plugin header parsing.

WordPress reads plugin metadata from a comment block at the top of the main
file::

    <?php
    /**
     * Plugin Name: Akismet Anti-spam
     * Version: 5.3
     */

Only the first 8 KiB of the file are considered, header names are
case-insensitive, and a trailing ``*/`` on the header line is dropped.
"""

from __future__ import annotations

import re
from pathlib import Path

HEADER_READ_BYTES: int = 8192

_CLOSE_COMMENT_RE = re.compile(r"\s*(?:\*/|\?>).*")


def _header_pattern(header: str) -> re.Pattern[str]:
    return re.compile(
        r"^(?:[ \t]*<\?php)?[ \t/*#@]*" + re.escape(header) + r":(.*)$",
        re.IGNORECASE | re.MULTILINE,
    )


_PATTERNS: dict[str, re.Pattern[str]] = {
    "Name": _header_pattern("Plugin Name"),
    "Version": _header_pattern("Version"),
}


def read_header_block(path: Path) -> str:
    """Return the first 8 KiB of ``path`` decoded leniently."""
    with path.open("rb") as fh:
        raw = fh.read(HEADER_READ_BYTES)
    return raw.decode("utf-8", errors="replace").replace("\r", "\n")


def parse_headers(text: str) -> dict[str, str]:
    """Extract the known plugin headers from a header block.

    Returns:
        Mapping with keys ``Name`` and ``Version``; a header that is absent
        or empty maps to ``""``.
    """
    headers: dict[str, str] = {}
    for key, pattern in _PATTERNS.items():
        match = pattern.search(text)
        value = match.group(1) if match else ""
        headers[key] = _CLOSE_COMMENT_RE.sub("", value).strip()
    return headers


def read_headers(path: Path) -> dict[str, str]:
    """Parse the plugin headers of the file at ``path``.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_headers(read_header_block(path))
