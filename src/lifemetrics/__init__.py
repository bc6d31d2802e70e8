"""
LifeMetrics: declarative filtering, search and sorting for personal-data records.
"""

__version__ = "0.1.0"
