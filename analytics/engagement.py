"""
Per-visitor engagement tracking.

A visitor counts as engaged once any one threshold is met: enough page
views, enough time on site, or a meaningful action such as saving an alert.
The tracker is independent of where counters live so it can run against the
Django session in requests and a plain dict in tests.
"""
import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

MIN_PAGE_VIEWS = 2
MIN_TIME_SPENT_MS = 30_000
MIN_MEANINGFUL_ACTIONS = 1

SESSION_KEY = "user-engagement"


@dataclass
class EngagementData:
    page_views: int = 0
    time_spent: int = 0
    meaningful_actions: int = 0
    first_visit_time: int = 0
    last_action_time: int = 0
    last_path: Optional[str] = None


class EngagementStore(Protocol):
    def load(self) -> Optional[Dict]:
        ...

    def save(self, data: Dict) -> None:
        ...


class SessionEngagementStore:
    """Keeps counters in the visitor's Django session"""

    def __init__(self, session, key: str = SESSION_KEY):
        self.session = session
        self.key = key

    def load(self) -> Optional[Dict]:
        return self.session.get(self.key)

    def save(self, data: Dict) -> None:
        self.session[self.key] = data
        self.session.modified = True


class DictEngagementStore:
    def __init__(self, initial: Optional[Dict] = None):
        self.data = initial

    def load(self) -> Optional[Dict]:
        return self.data

    def save(self, data: Dict) -> None:
        self.data = dict(data)


def now_ms() -> int:
    return int(time.time() * 1000)


class EngagementTracker:
    def __init__(self, store: EngagementStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self.data = self._load()

    def _load(self) -> EngagementData:
        stored = self.store.load()
        if stored:
            try:
                return EngagementData(**stored)
            except TypeError:
                logger.warning("Discarding malformed engagement data")
        started = self.clock()
        return EngagementData(first_visit_time=started, last_action_time=started)

    def _touch(self):
        self.data.last_action_time = self.clock()
        self.store.save(asdict(self.data))

    def record_page_view(self, path: Optional[str] = None):
        # Re-renders of the same path are not new page views
        if path is not None and path == self.data.last_path:
            return
        self.data.page_views += 1
        self.data.last_path = path
        self._touch()

    def add_time(self, milliseconds: int):
        if milliseconds <= 0:
            return
        self.data.time_spent += milliseconds
        self._touch()

    def track_action(self, action_type: str):
        logger.debug(f"Meaningful action tracked: {action_type}")
        self.data.meaningful_actions += 1
        self._touch()

    def is_engaged(self) -> bool:
        return (
            self.data.page_views >= MIN_PAGE_VIEWS
            or self.data.time_spent >= MIN_TIME_SPENT_MS
            or self.data.meaningful_actions >= MIN_MEANINGFUL_ACTIONS
        )

    def snapshot(self) -> Dict:
        return {
            "pageViews": self.data.page_views,
            "timeSpent": self.data.time_spent,
            "meaningfulActions": self.data.meaningful_actions,
            "firstVisitTime": self.data.first_visit_time,
            "lastActionTime": self.data.last_action_time,
            "isEngaged": self.is_engaged(),
            "thresholds": {
                "minPageViews": MIN_PAGE_VIEWS,
                "minTimeSpent": MIN_TIME_SPENT_MS,
                "minMeaningfulActions": MIN_MEANINGFUL_ACTIONS,
            },
        }
