"""
Response Cache Utilities
Keeps recent GET responses from the Schema API in memory with a TTL
"""
from typing import Dict, Optional, Any, Tuple
import json
import logging
import time

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]

def make_cache_key(session_id: Optional[str], path: str, params: Optional[Dict] = None) -> CacheKey:
    """
    Build a cache key for a GET request

    Args:
        session_id: Visitor session the response belongs to
        path: Resolved resource path
        params: Query parameters sent with the request

    Returns:
        Hashable cache key
    """
    encoded = json.dumps(params or {}, sort_keys=True, default=str)
    return (session_id or "", path, encoded)

def collection_of(path: str) -> str:
    """Get the top-level collection a resource path belongs to ("/carts/1/items" -> "carts")"""
    return path.strip("/").split("/", 1)[0]

class ResponseCache:
    """
    In-memory cache of API responses with TTL and bounded size
    Oldest entries are evicted first when the cache is full
    """

    def __init__(self, max_size: int = 500, ttl_seconds: int = 300):
        self.cache: Dict[CacheKey, Dict[str, Any]] = {}
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds

    def get(self, key: CacheKey) -> Optional[Any]:
        """Get cached value if not expired"""
        if key not in self.cache:
            return None

        entry = self.cache[key]
        if time.time() - entry["timestamp"] > self.ttl_seconds:
            del self.cache[key]
            return None

        logger.debug("Cache hit for %s", key[1])
        return entry["value"]

    def set(self, key: CacheKey, value: Any) -> None:
        """Set cached value with timestamp"""
        self._clean_expired()

        while self.cache and len(self.cache) >= self.max_size:
            oldest_key = min(self.cache.keys(), key=lambda k: self.cache[k]["timestamp"])
            del self.cache[oldest_key]

        self.cache[key] = {
            "value": value,
            "timestamp": time.time()
        }

    def invalidate(self, path: str) -> int:
        """
        Drop every entry belonging to the same collection as path

        Returns:
            Number of entries removed
        """
        collection = collection_of(path)
        stale = [key for key in self.cache if collection_of(key[1]) == collection]
        for key in stale:
            del self.cache[key]
        if stale:
            logger.debug("Invalidated %d cached responses for /%s", len(stale), collection)
        return len(stale)

    def _clean_expired(self) -> None:
        """Remove expired entries"""
        current_time = time.time()
        expired_keys = [
            key for key, entry in self.cache.items()
            if current_time - entry["timestamp"] > self.ttl_seconds
        ]
        for key in expired_keys:
            del self.cache[key]

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics"""
        self._clean_expired()
        return {
            "size": len(self.cache),
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds
        }
