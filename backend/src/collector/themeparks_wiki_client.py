"""
Theme Park Wait Times - ThemeParks.wiki API Client
Fetches destinations and live attraction data with retry logic using tenacity.

API Documentation: https://api.themeparks.wiki/docs/v1/
"""

import requests
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from tenacity import (
    Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type
)
from tenacity.wait import wait_base

from utils.config import (
    THEMEPARKS_API_URL, THEMEPARKS_API_KEY, MAX_RETRY_ATTEMPTS, RETRY_BACKOFF_MULTIPLIER
)
from utils.logger import logger


REQUEST_TIMEOUT_SECONDS = 15


class EntityType(Enum):
    """Entity types from ThemeParks.wiki API."""
    DESTINATION = "DESTINATION"
    PARK = "PARK"
    ATTRACTION = "ATTRACTION"
    RESTAURANT = "RESTAURANT"
    HOTEL = "HOTEL"
    SHOW = "SHOW"


class UpstreamFetchError(Exception):
    """Raised when the API answers with a non-2xx status or cannot be reached."""

    def __init__(self, status_code: Optional[int], body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        if status_code is None:
            message = f"Fetch error: {body}"
        else:
            message = f"Fetch error: {status_code} - {body}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)


class ThemeParksWikiClient:
    """
    Client for ThemeParks.wiki API with automatic retry logic.

    Implements exponential backoff for transient failures (network, timeouts).
    HTTP error statuses are not retried; they raise UpstreamFetchError.
    """

    def __init__(
        self,
        base_url: str = THEMEPARKS_API_URL,
        api_key: Optional[str] = THEMEPARKS_API_KEY,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
        retry_wait: Optional[wait_base] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(
            multiplier=RETRY_BACKOFF_MULTIPLIER, min=4, max=60
        )
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'ThemeParkWaitTimes/1.0 (Data Collection Bot)',
            'Accept': 'application/json'
        })
        if api_key:
            self.session.headers['Authorization'] = f"Bearer {api_key}"

    def _send(self, url: str) -> requests.Response:
        """GET with retries on timeouts and connection errors."""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type((requests.Timeout, requests.ConnectionError)),
            reraise=True
        )
        for attempt in retrying:
            with attempt:
                return self.session.get(url, timeout=REQUEST_TIMEOUT_SECONDS)

    def _request(self, path: str) -> Any:
        """
        Fetch a path under the base URL and decode the JSON body.

        Raises:
            UpstreamFetchError: Non-2xx status, transport failure after retries,
                                or a body that is not valid JSON
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url}")

        try:
            response = self._send(url)
        except requests.RequestException as e:
            raise UpstreamFetchError(None, f"{type(e).__name__}: {e}", url=url) from e

        if not response.ok:
            raise UpstreamFetchError(response.status_code, response.text, url=url)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(response.status_code, f"Invalid JSON body: {e}", url=url) from e

    @staticmethod
    def _entity_path(entity_id: str) -> str:
        if not entity_id:
            raise ValueError("entity_id is required")
        return f"/entity/{quote(str(entity_id), safe='')}"

    def get_destinations(self) -> List[Dict]:
        """
        Fetch list of all destinations (resorts) with their parks nested inside.

        Returns:
            List of destination dictionaries ({id, name, slug, parks: [{id, name}]})
        """
        data = self._request("/destinations")
        destinations = (data or {}).get("destinations") or []
        logger.info(f"Fetched {len(destinations)} destinations from ThemeParks.wiki")
        return destinations

    def get_entity(self, entity_id: str) -> Dict:
        """Fetch entity document for any entity (park, ride, restaurant, etc)."""
        return self._request(self._entity_path(entity_id))

    def get_entity_children(self, entity_id: str) -> List[Dict]:
        """Fetch children (attractions, shows, restaurants) for an entity."""
        data = self._request(f"{self._entity_path(entity_id)}/children")
        children = (data or {}).get("children") or []
        logger.debug(f"Fetched {len(children)} children for entity {entity_id}")
        return children

    def get_entity_live(self, entity_id: str) -> Dict:
        """
        Fetch live data (wait times, status, operating hours) for an entity.

        This is the primary endpoint for collecting ride data.

        Returns:
            Dictionary with a liveData array containing all child entities
        """
        return self._request(f"{self._entity_path(entity_id)}/live")

    def get_entity_schedule(self, entity_id: str) -> Dict:
        """Fetch the upcoming operating schedule for a park."""
        return self._request(f"{self._entity_path(entity_id)}/schedule")

    def get_entity_schedule_month(self, entity_id: str, year: int, month: int) -> Dict:
        """Fetch the operating schedule for a park for one calendar month."""
        if not 1 <= int(month) <= 12:
            raise ValueError(f"month must be between 1 and 12, got {month}")
        return self._request(
            f"{self._entity_path(entity_id)}/schedule/{int(year)}/{int(month):02d}"
        )

    def close(self):
        """Close the HTTP session."""
        self.session.close()

