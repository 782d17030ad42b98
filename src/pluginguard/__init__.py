"""PluginGuard: Checksum verification for installed WordPress plugins."""

from __future__ import annotations

import logging

__version__ = "0.1.0"
__license__ = "MIT"

# Library logging stays silent unless the application (or ``--debug``) configures it.
logging.getLogger(__name__).addHandler(logging.NullHandler())
