"""
pgit: private file tracking alongside a shared Git repository.

The :mod:`pgit.git` package owns the ``.git/info/exclude`` managed section and
per-file Git state classification.
"""

__version__ = "0.1.0"
