"""
Theme Park Wait Times - Ingestion Pipeline
Fetches live attraction data for the resort, gates on the number of operating
rides, and persists one wait time entry per ride.

Steps of a run:
1. Fetch every park of the resort destination (failed parks come back empty)
2. Count OPERATING attractions across all parks
3. Below the threshold nothing is persisted (parks not open yet)
4. Otherwise write a raw snapshot, then per park resolve ids and append entries;
   a failing park is logged and skipped
"""

import time
from datetime import datetime
from typing import Callable, List

from collector.live_data_fetcher import fetch_resort_attractions
from collector.themeparks_wiki_client import ThemeParksWikiClient
from collector.wait_time_extractor import extract_status, extract_wait_minutes
from database.document_store import DocumentStore
from database.repositories.identity_resolver import IdentityResolver
from database.repositories.wait_time_repository import WaitTimeRepository
from models.wait_time import ParkAttractions, PipelineResult
from utils.config import (
    RESORT_NAME, MIN_OPERATING_RIDES, SNAPSHOT_COLLECTION, WAIT_TIME_SOURCE,
    FETCH_MAX_WORKERS, MAX_SLUG_SUFFIX_ATTEMPTS
)
from utils.logger import logger, log_park_error, log_run_complete, log_run_gated
from utils.timezone import utc_now

UNKNOWN_PARK = 'unknown-park'
UNKNOWN_RIDE = 'unknown-ride'


def count_operating(parks: List[ParkAttractions]) -> int:
    """Number of OPERATING attractions across all parks."""
    return sum(park.operating_count for park in parks)


class IngestionPipeline:
    """
    One fetch-normalize-persist pass over the resort's parks.

    The pipeline is stateless between runs apart from the resolver's id cache;
    scheduling and liveness bookkeeping live in the scheduler.
    """

    def __init__(
        self,
        client: ThemeParksWikiClient,
        store: DocumentStore,
        resort_name: str = RESORT_NAME,
        min_operating_rides: int = MIN_OPERATING_RIDES,
        snapshot_collection: str = SNAPSHOT_COLLECTION,
        source: str = WAIT_TIME_SOURCE,
        max_workers: int = FETCH_MAX_WORKERS,
        max_suffix_attempts: int = MAX_SLUG_SUFFIX_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now
    ):
        self.client = client
        self.resort_name = resort_name
        self.min_operating_rides = min_operating_rides
        self.snapshot_collection = snapshot_collection
        self.source = source
        self.max_workers = max_workers
        self.clock = clock
        self.repository = WaitTimeRepository(store)
        self.resolver = IdentityResolver(store, max_suffix_attempts=max_suffix_attempts)

    def fetch(self) -> List[ParkAttractions]:
        """Fetch attractions for every park of the resort."""
        return fetch_resort_attractions(self.client, self.resort_name, max_workers=self.max_workers)

    def run_once(self) -> PipelineResult:
        """
        Execute a single ingestion run.

        Returns:
            PipelineResult with the fetched parks and the operating count

        Raises:
            DestinationNotFound: If the resort is missing from the destination list
            UpstreamFetchError: If the destination list cannot be fetched
            PersistenceError: If the raw snapshot cannot be written
        """
        start = time.monotonic()
        parks = self.fetch()
        operating_count = count_operating(parks)
        result = PipelineResult(parks=parks, operating_count=operating_count)

        if operating_count < self.min_operating_rides:
            log_run_gated(operating_count, self.min_operating_rides)
            return result

        self.repository.add_snapshot(self.snapshot_collection, parks, fetched_at=self.clock())

        for park in parks:
            try:
                result.entries_written += self._persist_park(park)
            except Exception as e:
                log_park_error(e, park_name=park.park_name, stage='persist')
                result.parks_failed += 1

        result.persisted = True
        log_run_complete(
            duration_seconds=round(time.monotonic() - start, 3),
            parks_processed=len(parks),
            operating_count=operating_count,
            parks_failed=result.parks_failed
        )
        return result

    def _persist_park(self, park: ParkAttractions) -> int:
        """
        Resolve the park and its rides and append one entry per ride.

        Returns:
            Number of wait time entries written
        """
        park_name = park.park_name or park.park_external_id or UNKNOWN_PARK
        park_id = self.resolver.resolve_park(park_name)

        written = 0
        for attraction in park.attractions:
            ride_name = attraction.name or attraction.id or UNKNOWN_RIDE
            ride_id = self.resolver.resolve_ride(park_id, ride_name)
            self.repository.upsert_ride(park_id, ride_id, name=ride_name)

            self.repository.add_wait_time(
                park_id,
                ride_id,
                extract_wait_minutes(attraction.queue),
                status=extract_status(attraction),
                timestamp=self.clock(),
                source=self.source
            )
            written += 1

        logger.debug(f"Saved {written} wait times for {park_name} ({park_id})")
        return written
