"""Redis client for the per-language answer translation cache."""

import logging
import redis

from faqdesk.errors import CacheError

logger = logging.getLogger(__name__)

# Translation cache keys: faq:<faq_id>:<lang>
CACHE_PREFIX = "faq:"
TRANSLATION_TTL = 3600  # 1 hour
SOCKET_TIMEOUT = 2  # seconds, for connect and for each command


def translation_key(faq_id: str, lang: str) -> str:
    """Cache key for one FAQ answer translation."""
    return f"{CACHE_PREFIX}{faq_id}:{lang}"


def faq_key_prefix(faq_id: str) -> str:
    """Prefix shared by every cached translation of one FAQ."""
    return f"{CACHE_PREFIX}{faq_id}:"


class RedisCache:
    """Thin wrapper around a Redis connection.

    Every method raises CacheError when Redis is not configured or the
    call fails. Callers that must never fail go through the helpers at the
    bottom of this module instead.
    """

    def __init__(self, url: str = None, client=None):
        self.url = url
        self._client = client

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self):
        """Open the connection pool and check it with a PING."""
        if self._client is not None:
            return self._client

        if not self.url:
            raise CacheError("REDIS_URL not set")

        try:
            client = redis.from_url(
                self.url,
                decode_responses=True,
                socket_connect_timeout=SOCKET_TIMEOUT,
                socket_timeout=SOCKET_TIMEOUT,
            )
            client.ping()
        except (redis.RedisError, ValueError) as e:
            # ValueError: malformed REDIS_URL
            raise CacheError(f"Redis connection failed: {e}") from e

        self._client = client
        logger.info("Redis connected successfully")
        return self._client

    def disconnect(self):
        """Close the connection pool. Safe to call more than once."""
        if self._client is None:
            return
        try:
            self._client.close()
        except redis.RedisError as e:
            logger.warning(f"Redis disconnect error: {e}")
        finally:
            self._client = None
        logger.info("Redis disconnected")

    def _get_client(self):
        # Lazy (re)connect so a Redis outage at boot does not need a restart
        return self._client if self._client is not None else self.connect()

    def ping(self) -> bool:
        try:
            return bool(self._get_client().ping())
        except redis.RedisError as e:
            raise CacheError(f"Redis ping error: {e}") from e

    def get(self, key: str):
        """Return the cached value, or None when the key is absent."""
        try:
            return self._get_client().get(key)
        except redis.RedisError as e:
            raise CacheError(f"Redis get error: {e}") from e

    def set(self, key: str, value: str, ttl: int = TRANSLATION_TTL):
        try:
            self._get_client().set(key, value, ex=ttl)
        except redis.RedisError as e:
            raise CacheError(f"Redis set error: {e}") from e

    def list_keys(self, prefix: str) -> set:
        """All keys starting with ``prefix``. Uses SCAN, never KEYS."""
        try:
            return set(self._get_client().scan_iter(match=f"{prefix}*"))
        except redis.RedisError as e:
            raise CacheError(f"Redis scan error: {e}") from e

    def delete_many(self, keys) -> int:
        keys = list(keys)
        if not keys:
            return 0
        try:
            return self._get_client().delete(*keys)
        except redis.RedisError as e:
            raise CacheError(f"Redis delete error: {e}") from e


# Best-effort helpers. Cache trouble degrades to a miss or a no-op.

def get_cached_answer(cache: RedisCache, faq_id: str, lang: str):
    """Cached answer translation, or None on a miss or any cache failure."""
    try:
        return cache.get(translation_key(faq_id, lang))
    except CacheError as e:
        logger.warning(f"Translation cache lookup failed for FAQ {faq_id} ({lang}): {e}")
        return None


def cache_answer(cache: RedisCache, faq_id: str, lang: str, answer: str,
                 ttl: int = TRANSLATION_TTL) -> bool:
    """Store an answer translation. Returns False if the write was dropped."""
    try:
        cache.set(translation_key(faq_id, lang), answer, ttl)
        return True
    except CacheError as e:
        logger.warning(f"Translation cache write failed for FAQ {faq_id} ({lang}): {e}")
        return False


def invalidate_faq(cache: RedisCache, faq_id: str) -> int:
    """Drop every cached translation of one FAQ. Returns keys deleted."""
    try:
        keys = cache.list_keys(faq_key_prefix(faq_id))
        deleted = cache.delete_many(keys)
    except CacheError as e:
        logger.warning(f"Translation cache invalidation failed for FAQ {faq_id}: {e}")
        return 0

    if deleted:
        logger.debug(f"Invalidated {deleted} cached translation(s) for FAQ {faq_id}")
    return deleted
