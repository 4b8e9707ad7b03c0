"""
Fetch rows and publish them as view models with loading/error state
"""
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class RowFetcher:
    """
    Runs `query()` on refetch(), maps each row with `transform` and exposes
    `data`, `loading` and `error`.

    Every refetch takes a sequence number when it starts; only the most
    recently started refetch may publish, so a slow earlier query can never
    overwrite newer data.
    """

    def __init__(
        self,
        query: Callable[[], Iterable[Dict[str, Any]]],
        transform: Callable[[Dict[str, Any]], Dict[str, Any]],
        name: str = "rows",
    ):
        self.query = query
        self.transform = transform
        self.name = name
        self.data: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self._lock = threading.Lock()
        self._sequence = 0

    @property
    def state(self) -> Dict[str, Any]:
        return {"data": self.data, "loading": self.loading, "error": self.error}

    def _begin(self) -> int:
        with self._lock:
            self._sequence += 1
            self.loading = True
            self.error = None
            return self._sequence

    def _publish(self, sequence: int, data=None, error=None) -> bool:
        with self._lock:
            if sequence != self._sequence:
                logger.debug(f"Discarding stale {self.name} result #{sequence} (latest is #{self._sequence})")
                return False
            if error is None:
                self.data = data
            self.error = error
            self.loading = False
            return True

    def refetch(self) -> Dict[str, Any]:
        """Issue one query. Returns the state after this call (which a newer refetch may own)."""
        sequence = self._begin()
        try:
            data = [self.transform(row) for row in self.query()]
        except Exception as e:
            logger.error(f"Error fetching {self.name}: {e}", exc_info=True)
            self._publish(sequence, error=str(e) or f"Failed to fetch {self.name}")
        else:
            self._publish(sequence, data=data)
        return self.state
