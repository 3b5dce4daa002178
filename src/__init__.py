# src/__init__.py — v1
"""earlreport — consolidate EARL test results into a single rollup report."""

from earlreport.version import __version__

__all__ = ["__version__"]
