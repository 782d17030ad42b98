"""Discovery of installed plugins and their files.

Public API::

    from pluginguard.inventory import FilesystemInventory, FilesystemLister

    inventory = FilesystemInventory(Path("/var/www/html"))
    snapshot = inventory.snapshot()
    for record in snapshot.plugins:
        print(record.name, record.version)
"""

from __future__ import annotations

from pluginguard.inventory.base import (
    ArtifactInventory,
    DirectoryLister,
    InventorySnapshot,
    slug_from_path,
)
from pluginguard.inventory.filesystem import (
    CORE_BUNDLED_ARTIFACTS,
    FilesystemInventory,
    FilesystemLister,
)

__all__ = [
    "ArtifactInventory",
    "CORE_BUNDLED_ARTIFACTS",
    "DirectoryLister",
    "FilesystemInventory",
    "FilesystemLister",
    "InventorySnapshot",
    "slug_from_path",
]
