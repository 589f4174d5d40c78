"""Directory ranking snapshots."""

from .feed import ZoxideFeed
from .index import FrecencyIndex, parse_zoxide_output

__all__ = ["FrecencyIndex", "ZoxideFeed", "parse_zoxide_output"]
