"""
Theme Park Wait Times - Ingestion State and Liveness Reporting
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class IngestionState:
    """
    In-memory state of the ingestion loop.

    Owned by the scheduler and shared by reference with the liveness reporter.
    Every read or write goes through `lock`.
    """
    poll_minutes: int
    last_success: Optional[str] = None
    last_error: Optional[str] = None
    is_running: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


def is_healthy(status: Dict[str, Any]) -> bool:
    """Healthy once any run has succeeded, or while no error has been recorded."""
    return bool(status.get('lastSuccess')) or not status.get('lastError')


class LivenessReporter:
    """Read-only view of the ingestion state for health probes."""

    def __init__(self, state: IngestionState):
        self.state = state

    def get_status(self) -> Dict[str, Any]:
        """
        Snapshot of the ingestion state.

        Returns:
            {"lastSuccess": str|None, "lastError": str|None, "pollMinutes": int}
        """
        with self.state.lock:
            return {
                'lastSuccess': self.state.last_success,
                'lastError': self.state.last_error,
                'pollMinutes': self.state.poll_minutes,
            }

    def is_healthy(self) -> bool:
        return is_healthy(self.get_status())
