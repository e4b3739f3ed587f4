"""caseintake: batch case identifier intake with per-item lookups and live progress."""

from caseintake.version import __version__

__all__ = ["__version__"]
