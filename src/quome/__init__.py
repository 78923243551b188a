"""Quome - command-line client for the Quome cloud platform.

The CLI lives in :mod:`quome.cli`; the typed API binding it is built on
lives in :mod:`quome.cli.platform`.
"""

import importlib.metadata

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["__version__"]
