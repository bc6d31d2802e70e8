"""
LifeMetrics command-line interface.
"""

from lifemetrics import __version__

__all__ = ["__version__"]
