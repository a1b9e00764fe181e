"""
Theme Park Wait Times - Wait Time Repository
Writes park/ride documents, the per-ride wait time series and raw fetch snapshots.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from database.document_store import DocumentStore, collection_path
from database.repositories.identity_resolver import PARKS_COLLECTION, RIDES_SUBCOLLECTION
from models.wait_time import ParkAttractions, WaitTimeEntry
from utils.timezone import to_iso_utc

WAIT_TIMES_SUBCOLLECTION = 'wait_times'


def rides_collection(park_id: str) -> str:
    return collection_path(PARKS_COLLECTION, park_id, RIDES_SUBCOLLECTION)


def wait_times_collection(park_id: str, ride_id: str) -> str:
    return collection_path(PARKS_COLLECTION, park_id, RIDES_SUBCOLLECTION, ride_id, WAIT_TIMES_SUBCOLLECTION)


class WaitTimeRepository:
    """
    Repository for the wait time document tree.

    Implements:
    - Merge-upserts of park and ride documents (never removes fields)
    - Append-only wait time entries, parents ensured first
    - Raw snapshot documents for audit/debug
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def upsert_park(self, park_id: str, name: Optional[str] = None) -> None:
        """Ensure parks/{park_id} exists, merging in the name when given."""
        data = {'id': park_id}
        if name:
            data['name'] = name
        self.store.set(PARKS_COLLECTION, park_id, data, merge=True)

    def upsert_ride(self, park_id: str, ride_id: str, name: Optional[str] = None) -> None:
        """Ensure parks/{park_id}/rides/{ride_id} exists, merging in the name when given."""
        data = {'id': ride_id}
        if name:
            data['name'] = name
        self.store.set(rides_collection(park_id), ride_id, data, merge=True)

    def add_wait_time(
        self,
        park_id: str,
        ride_id: str,
        wait_minutes: Optional[int],
        status: Optional[str] = None,
        timestamp: Union[datetime, str, None] = None,
        source: Optional[str] = None
    ) -> str:
        """
        Append an entry to parks/{park_id}/rides/{ride_id}/wait_times.

        Parent park and ride documents are ensured before the entry is written.

        Returns:
            Generated id of the new entry
        """
        self.upsert_park(park_id)
        self.upsert_ride(park_id, ride_id)

        entry = WaitTimeEntry(
            wait_minutes=wait_minutes,
            status=status,
            timestamp=to_iso_utc(timestamp),
            source=source
        )
        return self.store.add(wait_times_collection(park_id, ride_id), entry.to_dict())

    def get_wait_times(self, park_id: str, ride_id: str) -> List[WaitTimeEntry]:
        """A ride's wait time series, oldest first."""
        documents = self.store.list_documents(wait_times_collection(park_id, ride_id), order_by='timestamp')
        return [WaitTimeEntry.from_dict(document.data) for document in documents]

    def get_park(self, park_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get(PARKS_COLLECTION, park_id)

    def get_ride(self, park_id: str, ride_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get(rides_collection(park_id), ride_id)

    def list_rides(self, park_id: str) -> List[Dict[str, Any]]:
        return [document.data for document in self.store.list_documents(rides_collection(park_id))]

    def add_snapshot(
        self,
        collection: str,
        parks: Iterable[ParkAttractions],
        fetched_at: Union[datetime, str, None] = None
    ) -> str:
        """Persist the full fetch result for audit/debug."""
        return self.store.add(collection, {
            'data': [park.to_dict() for park in parks],
            'fetchedAt': to_iso_utc(fetched_at),
        })
