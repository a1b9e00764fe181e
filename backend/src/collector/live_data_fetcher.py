"""
Theme Park Wait Times - Live Data Fetcher
Fetches live attraction data for every park of one ThemeParks.wiki destination.

A failing park never fails the whole fetch: it is returned with an empty
attraction list so downstream code still knows it was attempted.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

from collector.themeparks_wiki_client import ThemeParksWikiClient, EntityType
from models.wait_time import AttractionRecord, ParkAttractions
from utils.config import RESORT_NAME, FETCH_MAX_WORKERS
from utils.logger import logger, log_park_error


class DestinationNotFound(Exception):
    """Raised when no destination matches the configured resort name."""

    def __init__(self, resort_name: str):
        self.resort_name = resort_name
        super().__init__(f"{resort_name} destination not found")


def find_destination(destinations: List[Dict], resort_name: str) -> Dict:
    """
    Select the destination whose name equals resort_name exactly.

    Raises:
        DestinationNotFound: If no destination has that name
    """
    for destination in destinations or []:
        if destination.get("name") == resort_name:
            return destination
    raise DestinationNotFound(resort_name)


def parse_attractions(live_response: Dict) -> List[AttractionRecord]:
    """Keep only ATTRACTION entries of a live data response."""
    attractions = []
    for item in (live_response or {}).get("liveData") or []:
        if item.get("entityType") != EntityType.ATTRACTION.value:
            continue
        attractions.append(AttractionRecord(
            id=item.get("id"),
            name=item.get("name"),
            status=item.get("status"),
            queue=item.get("queue"),
        ))
    return attractions


def fetch_park_attractions(client: ThemeParksWikiClient, park: Dict) -> ParkAttractions:
    """Fetch one park's attractions, degrading to an empty list on any failure."""
    park_id = park.get("id")
    park_name = park.get("name")
    try:
        live_response = client.get_entity_live(park_id)
        attractions = parse_attractions(live_response)
    except Exception as e:
        log_park_error(e, park_name=park_name or park_id, stage='fetch')
        attractions = []

    logger.debug(f"Fetched {len(attractions)} attractions for {park_name}")
    return ParkAttractions(park_external_id=park_id, park_name=park_name, attractions=attractions)


def fetch_resort_attractions(
    client: ThemeParksWikiClient,
    resort_name: str = RESORT_NAME,
    max_workers: int = FETCH_MAX_WORKERS
) -> List[ParkAttractions]:
    """
    Fetch live attraction data for every park of the named destination.

    Parks are fetched concurrently; the result keeps the destination's park order.

    Raises:
        DestinationNotFound: If the destination list has no exact name match
        UpstreamFetchError: If the destination list itself cannot be fetched
    """
    destination = find_destination(client.get_destinations(), resort_name)
    parks = destination.get("parks") or []
    logger.info(f"Fetching live data for {len(parks)} parks of {resort_name}")

    if not parks:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(parks)))) as executor:
        return list(executor.map(lambda park: fetch_park_attractions(client, park), parks))
