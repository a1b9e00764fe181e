"""
Integration Tests: Identity Resolver

Resolves park and ride names against a real (SQLite) document store:
- Exact name reuse
- Slug creation and suffixing on collisions
- Ride scoping per park
- Bounded suffix search
- Per-resolver caching
"""

import pytest
from unittest.mock import patch

from database.repositories.identity_resolver import (
    IdentityResolver, InvalidArgument, ResolutionExhausted, EMPTY_SLUG
)


pytestmark = pytest.mark.integration


@pytest.fixture
def resolver(document_store):
    return IdentityResolver(document_store, max_suffix_attempts=1000)


class TestResolvePark:
    """Test park resolution in the global scope."""

    def test_new_name_creates_slug_document(self, resolver, document_store):
        park_id = resolver.resolve_park('Disneyland Park')

        assert park_id == 'disneyland-park'
        assert document_store.get('parks', 'disneyland-park') == {
            'id': 'disneyland-park', 'name': 'Disneyland Park'
        }
        assert resolver.stats['created'] == 1

    def test_existing_name_is_reused(self, document_store):
        """
        Given: A park stored under a legacy id with the same name
        When: resolve_park() is called by a fresh resolver
        Then: The legacy id is returned and nothing is created
        """
        document_store.set('parks', 'legacy-123', {'id': 'legacy-123', 'name': 'Disneyland Park'})
        resolver = IdentityResolver(document_store)

        assert resolver.resolve_park('Disneyland Park') == 'legacy-123'
        assert document_store.count('parks') == 1
        assert resolver.stats['exact_name'] == 1

    def test_resolution_is_stable_across_resolvers(self, document_store):
        first = IdentityResolver(document_store).resolve_park('Disney California Adventure Park')
        second = IdentityResolver(document_store).resolve_park('Disney California Adventure Park')

        assert first == second == 'disney-california-adventure-park'
        assert document_store.count('parks') == 1

    def test_slug_collision_gets_suffix(self, resolver, document_store):
        """
        Given: 'Space Mountain!' and 'Space Mountain' both slugify to space-mountain
        When: Both are resolved
        Then: The second gets space-mountain-1
        """
        assert resolver.resolve_park('Space Mountain!') == 'space-mountain'
        assert resolver.resolve_park('Space Mountain') == 'space-mountain-1'
        assert resolver.resolve_park('space mountain') == 'space-mountain-2'

        assert document_store.get('parks', 'space-mountain-1')['name'] == 'Space Mountain'
        assert resolver.stats['suffixed'] == 2

    def test_existing_slug_with_same_name_is_reused(self, resolver, document_store):
        document_store.create_if_absent('parks', 'disneyland-park', {'id': 'disneyland-park', 'name': 'Disneyland Park'})

        with patch.object(document_store, 'query_equal', return_value=[]):
            park_id = resolver.resolve_park('Disneyland Park')

        assert park_id == 'disneyland-park'
        assert resolver.stats['reused_slug'] == 1
        assert document_store.count('parks') == 1

    def test_symbol_only_name_uses_fallback_slug(self, resolver):
        assert resolver.resolve_park('™®') == EMPTY_SLUG

    def test_empty_name_raises(self, resolver):
        with pytest.raises(InvalidArgument):
            resolver.resolve_park('')


class TestResolveRide:
    """Test ride resolution scoped to a park."""

    def test_same_ride_name_in_two_parks(self, resolver, document_store):
        ride_a = resolver.resolve_ride('disneyland-park', 'Space Mountain')
        ride_b = resolver.resolve_ride('magic-kingdom-park', 'Space Mountain')

        assert ride_a == ride_b == 'space-mountain'
        assert document_store.exists('parks/disneyland-park/rides', 'space-mountain')
        assert document_store.exists('parks/magic-kingdom-park/rides', 'space-mountain')

    def test_park_names_do_not_collide_with_ride_names(self, resolver, document_store):
        resolver.resolve_park('Fantasyland')

        assert resolver.resolve_ride('disneyland-park', 'Fantasyland') == 'fantasyland'
        assert document_store.count('parks') == 1

    def test_missing_park_id_raises(self, resolver):
        with pytest.raises(InvalidArgument):
            resolver.resolve_ride('', 'Space Mountain')

    def test_invalid_argument_is_value_error(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve_ride(None, 'Space Mountain')


class TestBoundsAndCache:
    """Test suffix bound and caching."""

    def test_exhausted_suffixes_raise(self, document_store):
        resolver = IdentityResolver(document_store, max_suffix_attempts=2)
        for doc_id in ('matterhorn', 'matterhorn-1', 'matterhorn-2'):
            document_store.set('parks', doc_id, {'id': doc_id, 'name': f'Other {doc_id}'})

        with pytest.raises(ResolutionExhausted) as exc_info:
            resolver.resolve_park('Matterhorn')

        assert exc_info.value.name == 'Matterhorn'
        assert exc_info.value.attempts == 2
        assert document_store.count('parks') == 3

    def test_cache_skips_store_lookups(self, resolver, document_store):
        resolver.resolve_park('Disneyland Park')

        with patch.object(document_store, 'query_equal') as mock_query:
            assert resolver.resolve_park('Disneyland Park') == 'disneyland-park'

        mock_query.assert_not_called()
        assert resolver.stats['cache_hits'] == 1

    def test_cache_is_scoped(self, resolver):
        park_id = resolver.resolve_park('Space Mountain')
        ride_id = resolver.resolve_ride(park_id, 'Space Mountain')

        assert resolver.stats['cache_hits'] == 0
        assert park_id == ride_id == 'space-mountain'

    def test_stats_returns_copy(self, resolver):
        stats = resolver.stats
        stats['created'] = 99

        assert resolver.stats['created'] == 0
