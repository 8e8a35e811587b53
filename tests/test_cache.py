"""
Unit tests for the TTL cache.
"""

from repo_dashboard.adapters.cache import TTLCache


class TestTTLCache:

    def test_get_after_set_returns_stored_value(self, cache):
        value = ('a', 'b')
        cache.set('issues:acme/widgets', value)

        assert cache.get('issues:acme/widgets') is value

    def test_missing_key_is_absent(self, cache):
        assert cache.get('nope') is None

    def test_entry_expires_after_ttl(self, clock):
        cache = TTLCache(ttl_seconds=300, clock=clock.monotonic)
        cache.set('k', [1])

        clock.advance(299)
        assert cache.get('k') == [1]

        clock.advance(2)
        assert cache.get('k') is None

    def test_expired_entry_is_removed_on_lookup(self, clock):
        cache = TTLCache(ttl_seconds=10, clock=clock.monotonic)
        cache.set('k', 'v')
        clock.advance(11)

        assert len(cache) == 1
        assert cache.get('k') is None
        assert len(cache) == 0

    def test_set_refreshes_expiry(self, clock):
        cache = TTLCache(ttl_seconds=10, clock=clock.monotonic)
        cache.set('k', 'old')
        clock.advance(8)
        cache.set('k', 'new')
        clock.advance(8)

        assert cache.get('k') == 'new'

    def test_empty_collection_is_a_hit(self, cache):
        cache.set('branches:acme/empty', ())

        assert cache.get('branches:acme/empty') == ()

    def test_clear_empties_all_entries(self, cache):
        cache.set('a', 1)
        cache.set('b', 2)

        cache.clear()

        assert cache.get('a') is None
        assert cache.get('b') is None
        assert len(cache) == 0
