"""
Theme Park Wait Times - Ingestion Data Models
Plain dataclasses passed between the fetcher, the pipeline and the scheduler.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


OPERATING_STATUS = "OPERATING"


@dataclass
class AttractionRecord:
    """One attraction from a park's live data feed (external ids, raw queue)."""
    id: Optional[str]
    name: Optional[str]
    status: Optional[str]
    queue: Any = None

    @property
    def is_operating(self) -> bool:
        return self.status == OPERATING_STATUS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "queue": self.queue,
        }


@dataclass
class ParkAttractions:
    """Live attractions for a single park of the destination."""
    park_external_id: Optional[str]
    park_name: Optional[str]
    attractions: List[AttractionRecord] = field(default_factory=list)

    @property
    def operating_count(self) -> int:
        return sum(1 for attraction in self.attractions if attraction.is_operating)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "park_external_id": self.park_external_id,
            "park_name": self.park_name,
            "attractions": [attraction.to_dict() for attraction in self.attractions],
        }


@dataclass
class WaitTimeEntry:
    """
    A single point of a ride's wait-time series.

    Stored under parks/{park_id}/rides/{ride_id}/wait_times and never updated.
    """
    wait_minutes: Optional[int]
    status: Optional[str]
    timestamp: str
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wait_minutes": self.wait_minutes,
            "status": self.status,
            "timestamp": self.timestamp,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaitTimeEntry":
        return cls(
            wait_minutes=data.get("wait_minutes"),
            status=data.get("status"),
            timestamp=data.get("timestamp"),
            source=data.get("source"),
        )


@dataclass
class PipelineResult:
    """Outcome of one ingestion run."""
    parks: List[ParkAttractions]
    operating_count: int
    persisted: bool = False
    parks_failed: int = 0
    entries_written: int = 0

    @property
    def attraction_count(self) -> int:
        return sum(len(park.attractions) for park in self.parks)
