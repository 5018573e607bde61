"""Redis-backed tip store shared by every API worker."""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from weather_guide.domain import LocalTip, TipCategory
from weather_guide.tip_store.base import TipStore
from weather_guide.tip_store.memory import location_key
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="tip_store/redis_tip_store")


def _decode(raw) -> str:
    return raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)


class RedisTipStore(TipStore):
    """
    Tips stored as JSON strings, one sorted set per location for ordering and a
    single hash of like counters so likes can be incremented atomically.
    """

    def __init__(self, client, prefix: str = "tips:") -> None:
        """Initialize with a Redis client and key prefix."""
        logger.debug("Initializing RedisTipStore")
        self.client = client
        self.prefix = prefix

    def _tip_key(self, tip_id: str) -> str:
        return f"{self.prefix}tip:{tip_id}"

    def _location_key(self, location: str) -> str:
        return f"{self.prefix}location:{location_key(location)}"

    @property
    def _likes_key(self) -> str:
        return f"{self.prefix}likes"

    def _generate_id(self) -> str:
        """Generate a new tip id."""
        return str(uuid.uuid4())

    @staticmethod
    def _dump(tip: LocalTip) -> str:
        """Serialize a tip without its like counter."""
        return tip.model_dump_json(exclude={"likes"})

    def _load(self, raw) -> Optional[LocalTip]:
        """Deserialize a stored tip and attach its current like count."""
        try:
            data = json.loads(_decode(raw))
            likes_raw = self.client.hget(self._likes_key, data["id"])
            data["likes"] = int(_decode(likes_raw)) if likes_raw is not None else 0
            return LocalTip.model_validate(data)
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to deserialize tip: %s", exc)
            return None

    def add_tip(self, location, author, content, category=TipCategory.GENERAL) -> LocalTip:
        """Persist a new tip and index it under its location."""
        tip = LocalTip(
            id=self._generate_id(),
            location=location,
            author=author,
            content=content,
            category=category,
            likes=0,
            created_at=datetime.now(timezone.utc),
        )
        tip_key = self._tip_key(tip.id)
        try:
            # nx: never overwrite an existing tip on an id collision
            if not self.client.set(tip_key, self._dump(tip), nx=True):
                raise RuntimeError("Tip id collision")
        except Exception as exc:
            logger.error("Failed to write tip to Redis: %s", exc)
            raise
        try:
            self.client.zadd(self._location_key(location), {tip.id: tip.created_at.timestamp()})
        except Exception as exc:
            # every stored tip must be indexed under its location
            logger.error("Failed to index tip in Redis; removing it: %s", exc)
            self.client.delete(tip_key)
            raise
        return tip

    def list_tips(self, location: str) -> List[LocalTip]:
        """Return a location's tips, newest first; unreadable entries are skipped."""
        try:
            ids = self.client.zrevrange(self._location_key(location), 0, -1)
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to list tips from Redis: %s", exc)
            return []
        tips: List[LocalTip] = []
        for raw_id in ids:
            tip = self.get_tip(_decode(raw_id))
            if tip is not None:
                tips.append(tip)
        return tips

    def get_tip(self, tip_id: str) -> Optional[LocalTip]:
        try:
            raw = self.client.get(self._tip_key(tip_id))
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to read tip from Redis: %s", exc)
            return None
        if not raw:
            return None
        return self._load(raw)

    def like_tip(self, tip_id: str) -> Optional[LocalTip]:
        """Atomically bump the like counter of an existing tip."""
        if self.get_tip(tip_id) is None:
            return None
        try:
            self.client.hincrby(self._likes_key, tip_id, 1)
        except Exception as exc:
            logger.error("Failed to like tip in Redis: %s", exc)
            raise
        liked = self.get_tip(tip_id)
        if liked is None:
            # deleted between the existence check and the increment
            self.client.hdel(self._likes_key, tip_id)
        return liked

    def delete_tip(self, tip_id: str) -> bool:
        """Remove the tip, its index entry and its like counter in one transaction."""
        tip = self.get_tip(tip_id)
        if tip is None:
            return False
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(self._tip_key(tip_id))
            pipe.zrem(self._location_key(tip.location), tip_id)
            pipe.hdel(self._likes_key, tip_id)
            pipe.execute()
        except Exception as exc:
            logger.error("Failed to delete tip from Redis: %s", exc)
            raise
        return True

    def clear(self) -> None:
        """Best-effort clear for all keys under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to clear tips from Redis: %s", exc)
