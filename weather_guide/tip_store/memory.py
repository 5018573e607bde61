"""In-memory tip store, the default backend for a single-process deployment."""

import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from weather_guide.domain import LocalTip, TipCategory
from weather_guide.tip_store.base import TipStore

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="tip_store/in_memory_tip_store")


def location_key(location: str) -> str:
    """Case/whitespace-insensitive key so "Pune, India" and " pune, india" share a board."""
    return " ".join(location.split()).lower()


class InMemoryTipStore(TipStore):
    """Thread-safe in-memory store. Tips are lost on restart."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryTipStore")
        self._tips: dict[str, LocalTip] = {}
        # location key -> tip ids, oldest first
        self._by_location: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def _generate_id(self) -> str:
        """Generate a new tip id."""
        return str(uuid.uuid4())

    def add_tip(self, location, author, content, category=TipCategory.GENERAL) -> LocalTip:
        """Store a tip and return it."""
        with self._lock:
            tip_id = self._generate_id()
            while tip_id in self._tips:
                tip_id = self._generate_id()
            tip = LocalTip(
                id=tip_id,
                location=location,
                author=author,
                content=content,
                category=category,
                likes=0,
                created_at=datetime.now(timezone.utc),
            )
            self._tips[tip_id] = tip
            self._by_location.setdefault(location_key(location), []).append(tip_id)
            return tip

    def list_tips(self, location: str) -> List[LocalTip]:
        """Return a location's tips, newest first."""
        with self._lock:
            ids = self._by_location.get(location_key(location), [])
            return [self._tips[tid] for tid in reversed(ids) if tid in self._tips]

    def get_tip(self, tip_id: str) -> Optional[LocalTip]:
        with self._lock:
            return self._tips.get(tip_id)

    def like_tip(self, tip_id: str) -> Optional[LocalTip]:
        """Increment likes and store the updated copy."""
        with self._lock:
            tip = self._tips.get(tip_id)
            if tip is None:
                return None
            liked = tip.model_copy(update={"likes": tip.likes + 1})
            self._tips[tip_id] = liked
            return liked

    def delete_tip(self, tip_id: str) -> bool:
        with self._lock:
            tip = self._tips.pop(tip_id, None)
            if tip is None:
                return False
            ids = self._by_location.get(location_key(tip.location), [])
            if tip_id in ids:
                ids.remove(tip_id)
            return True

    def clear(self) -> None:
        """Clear all tips."""
        with self._lock:
            self._tips.clear()
            self._by_location.clear()
