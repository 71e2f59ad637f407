"""
Tests for the Redis translation cache client and its best-effort helpers.
"""

import pytest
import redis

from faqdesk.errors import CacheError
from faqdesk.services.redis_client import (
    RedisCache,
    SOCKET_TIMEOUT,
    TRANSLATION_TTL,
    cache_answer,
    faq_key_prefix,
    get_cached_answer,
    invalidate_faq,
    translation_key,
)


class TestKeys:
    """Key format must stay compatible with existing cache entries."""

    def test_translation_key(self):
        assert translation_key('123', 'es') == 'faq:123:es'

    def test_prefix_matches_every_language(self):
        prefix = faq_key_prefix('123')
        assert translation_key('123', 'es').startswith(prefix)
        assert translation_key('123', 'fr').startswith(prefix)
        assert not translation_key('1234', 'es').startswith(prefix)


class TestRedisCache:
    """Tests for the raw client wrapper."""

    def test_get_missing_key_returns_none(self, cache):
        assert cache.get('faq:123:es') is None

    def test_set_uses_one_hour_ttl(self, cache, fake_redis):
        cache.set('faq:123:es', 'Respuesta')

        assert fake_redis.store['faq:123:es'] == 'Respuesta'
        assert fake_redis.ttls['faq:123:es'] == TRANSLATION_TTL == 3600

    def test_list_keys_by_prefix(self, cache, fake_redis):
        fake_redis.store.update({'faq:1:es': 'a', 'faq:1:fr': 'b', 'faq:2:es': 'c'})

        assert cache.list_keys('faq:1:') == {'faq:1:es', 'faq:1:fr'}

    def test_delete_many_with_no_keys_skips_redis(self, cache, fake_redis):
        assert cache.delete_many([]) == 0
        assert 'delete' not in fake_redis.calls

    def test_failures_raise_cache_error(self, cache, fake_redis):
        fake_redis.fail = True

        with pytest.raises(CacheError):
            cache.get('faq:1:es')
        with pytest.raises(CacheError):
            cache.set('faq:1:es', 'x')
        with pytest.raises(CacheError):
            cache.list_keys('faq:1:')

    def test_unconfigured_cache_raises(self):
        cache = RedisCache(url=None)

        with pytest.raises(CacheError):
            cache.get('faq:1:es')

    def test_connect_failure_raises_cache_error(self, monkeypatch):
        def broken_from_url(url, **kwargs):
            raise redis.ConnectionError('refused')

        monkeypatch.setattr(redis, 'from_url', broken_from_url)
        cache = RedisCache(url='redis://localhost:6379/0')

        with pytest.raises(CacheError):
            cache.connect()
        assert not cache.connected

    def test_connect_sets_socket_timeouts(self, monkeypatch, fake_redis):
        seen = {}

        def recording_from_url(url, **kwargs):
            seen.update(kwargs)
            return fake_redis

        monkeypatch.setattr(redis, 'from_url', recording_from_url)
        cache = RedisCache(url='redis://localhost:6379/0')

        assert cache.connect() is fake_redis
        assert seen['decode_responses'] is True
        assert seen['socket_connect_timeout'] == SOCKET_TIMEOUT
        assert seen['socket_timeout'] == SOCKET_TIMEOUT

    def test_disconnect_closes_client(self, cache, fake_redis):
        cache.disconnect()

        assert 'close' in fake_redis.calls
        assert not cache.connected
        # Second call is a no-op
        cache.disconnect()


class TestBestEffortHelpers:
    """Cache trouble must degrade to a miss or a no-op."""

    def test_get_cached_answer_hit(self, cache, fake_redis):
        fake_redis.store['faq:123:es'] = 'Respuesta'

        assert get_cached_answer(cache, '123', 'es') == 'Respuesta'

    def test_get_cached_answer_miss(self, cache):
        assert get_cached_answer(cache, '123', 'es') is None

    def test_get_cached_answer_degrades_on_failure(self, cache, fake_redis):
        fake_redis.store['faq:123:es'] = 'Respuesta'
        fake_redis.fail = True

        assert get_cached_answer(cache, '123', 'es') is None

    def test_cache_answer_degrades_on_failure(self, cache, fake_redis):
        fake_redis.fail = True

        assert cache_answer(cache, '123', 'es', 'Respuesta') is False

    def test_invalidate_deletes_all_languages_of_one_faq(self, cache, fake_redis):
        fake_redis.store.update({
            'faq:123:es': 'a',
            'faq:123:fr': 'b',
            'faq:456:es': 'c',
        })

        assert invalidate_faq(cache, '123') == 2
        assert fake_redis.store == {'faq:456:es': 'c'}

    def test_invalidate_without_keys_is_noop(self, cache, fake_redis):
        assert invalidate_faq(cache, '123') == 0
        assert invalidate_faq(cache, '123') == 0
        assert 'delete' not in fake_redis.calls

    def test_invalidate_degrades_on_failure(self, cache, fake_redis):
        fake_redis.fail = True

        assert invalidate_faq(cache, '123') == 0
