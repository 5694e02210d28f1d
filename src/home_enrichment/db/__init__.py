"""Cache storage for enriched property data."""

from home_enrichment.db.cache import CacheFamily, TTLCache
from home_enrichment.db.storage import CacheStorage

__all__ = ["CacheFamily", "CacheStorage", "TTLCache"]
