"""
Theme Park Wait Times - Identity Resolver
Maps human-readable park and ride names onto stable document ids.

Matching algorithm:
1. Exact match on the stored `name` field within the scope
2. Otherwise slugify the name and create the document at that id
3. On a slug collision with a differently-named document, try `slug-1`,
   `slug-2`, ... up to a bounded number of suffixes

Creation goes through the store's create-if-absent primitive, so two workers
resolving the same new name converge on one document instead of erroring.
"""

import re
from typing import Dict, Optional, Tuple

from database.document_store import DocumentStore, collection_path
from utils.config import MAX_SLUG_SUFFIX_ATTEMPTS
from utils.logger import logger


PARKS_COLLECTION = 'parks'
RIDES_SUBCOLLECTION = 'rides'

# Scope for park ids; ride ids are scoped by their park id
GLOBAL_SCOPE = None

MAX_SLUG_LENGTH = 150
EMPTY_SLUG = 'unnamed'

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]+')


class InvalidArgument(ValueError):
    """Raised when the resolver is called without a name."""
    pass


class ResolutionExhausted(Exception):
    """Raised when every suffixed slug candidate is taken by another name."""

    def __init__(self, name: str, attempts: int):
        self.name = name
        self.attempts = attempts
        super().__init__(f"No free id for '{name}' after {attempts} suffixed candidates")


def slugify_name(name: str) -> str:
    """
    Create a friendly id from a name.

    Examples:
        >>> slugify_name("Disney California Adventure Park")
        'disney-california-adventure-park'
        >>> slugify_name("  Indiana Jones™ Adventure ")
        'indiana-jones-adventure'
    """
    slug = _NON_ALPHANUMERIC.sub('-', name.lower().strip())
    return slug.strip('-')[:MAX_SLUG_LENGTH]


def scope_collection(scope: Optional[str]) -> str:
    """Collection holding the documents of a scope."""
    if scope is GLOBAL_SCOPE:
        return PARKS_COLLECTION
    return collection_path(PARKS_COLLECTION, scope, RIDES_SUBCOLLECTION)


class IdentityResolver:
    """
    Resolves names to ids, creating documents for names seen the first time.

    Resolved ids are cached per (scope, name) for the lifetime of the resolver.
    """

    def __init__(self, store: DocumentStore, max_suffix_attempts: int = MAX_SLUG_SUFFIX_ATTEMPTS):
        self.store = store
        self.max_suffix_attempts = max_suffix_attempts
        self._cache: Dict[Tuple[Optional[str], str], str] = {}

        # Statistics
        self._stats = {
            'exact_name': 0,
            'created': 0,
            'reused_slug': 0,
            'suffixed': 0,
            'cache_hits': 0
        }

    @property
    def stats(self) -> Dict[str, int]:
        """Get resolution statistics."""
        return self._stats.copy()

    def resolve_park(self, name: str) -> str:
        return self.resolve_or_create(GLOBAL_SCOPE, name)

    def resolve_ride(self, park_id: str, name: str) -> str:
        if not park_id:
            raise InvalidArgument("Park id is required to resolve a ride")
        return self.resolve_or_create(park_id, name)

    def resolve_or_create(self, scope: Optional[str], name: str) -> str:
        """
        Return the id for `name` within `scope`, creating a document if needed.

        Args:
            scope: GLOBAL_SCOPE for parks, or a park id for rides of that park
            name: Human-readable entity name

        Raises:
            InvalidArgument: If name is empty
            ResolutionExhausted: If all suffixed candidates belong to other names
            PersistenceError: If the store fails
        """
        if not name:
            raise InvalidArgument("Name is required")

        cache_key = (scope, name)
        if cache_key in self._cache:
            self._stats['cache_hits'] += 1
            return self._cache[cache_key]

        collection = scope_collection(scope)
        resolved = self._find_by_name(collection, name)
        if resolved is not None:
            self._stats['exact_name'] += 1
        else:
            resolved = self._create_from_slug(collection, name)

        self._cache[cache_key] = resolved
        return resolved

    def _find_by_name(self, collection: str, name: str) -> Optional[str]:
        matches = self.store.query_equal(collection, 'name', name, limit=1)
        return matches[0].id if matches else None

    def _create_from_slug(self, collection: str, name: str) -> str:
        base = slugify_name(name) or EMPTY_SLUG
        candidate = base

        for suffix in range(self.max_suffix_attempts + 1):
            if suffix:
                candidate = f"{base}-{suffix}"

            if self.store.create_if_absent(collection, candidate, {'id': candidate, 'name': name}):
                self._stats['created'] += 1
                if suffix:
                    self._stats['suffixed'] += 1
                logger.info(f"Created {collection}/{candidate} for '{name}'")
                return candidate

            existing = self.store.get(collection, candidate) or {}
            if existing.get('name') == name:
                # Another writer created it first
                self._stats['reused_slug'] += 1
                return candidate

            logger.debug(f"Slug collision at {collection}/{candidate} for '{name}'")

        raise ResolutionExhausted(name, self.max_suffix_attempts)
