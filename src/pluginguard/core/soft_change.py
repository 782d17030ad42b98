"""Files whose changes only count in strict mode.

WordPress.org rewrites readme files between releases (stable tag bumps,
changelog edits) without touching plugin behaviour, so a mismatch on them
is noise unless the caller explicitly asks for strict verification.
"""

from __future__ import annotations

SOFT_CHANGE_FILES: frozenset[str] = frozenset({
    "readme.txt",
    "readme.md",
})


def is_soft_change(path: str) -> bool:
    """Return True if ``path`` is exempt from mismatch reporting.

    The comparison is case-insensitive and applies to the whole relative
    path, so ``README.txt`` is exempt but ``docs/readme.txt`` is not.
    """
    return path.lower() in SOFT_CHANGE_FILES
