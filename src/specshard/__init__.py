"""specshard - split large specifications into budget-sized shards."""

from importlib.metadata import version

try:
    __version__ = version("specshard")
except Exception:
    __version__ = "0.0.0-dev"
