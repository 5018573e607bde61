"""Tip board facade over pluggable backends."""
from typing import List, Optional

import redis

from weather_guide.config import settings
from weather_guide.domain import LocalTip, TipCategory
from weather_guide.tip_store import InMemoryTipStore, RedisTipStore, TipStore
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="tip_manager")


def _init_store() -> TipStore:
    """Initialize the backing tip store based on configuration."""
    if settings.tips_redis_url:
        try:
            client = redis.Redis.from_url(settings.tips_redis_url)
            client.ping()
            logger.info("Using RedisTipStore", extra={"redis_url": mask_url(settings.tips_redis_url)})
            return RedisTipStore(client, prefix=settings.tips_redis_prefix)
        except (redis.RedisError, ValueError) as exc:
            logger.warning("Falling back to InMemoryTipStore (Redis unavailable)", extra={"error": str(exc)})
    return InMemoryTipStore()


_store: TipStore = _init_store()


def use_in_memory_store_for_tests() -> None:
    """Override store for tests to ensure isolation and determinism."""
    global _store
    _store = InMemoryTipStore()


def _clean(value: str | None, field: str) -> str:
    """Trim a free-text field and reject it if nothing is left."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field} must not be blank")
    return cleaned


def add_tip(location: str, author: str, content: str, category: TipCategory = TipCategory.GENERAL) -> LocalTip:
    """Validate and store a community tip."""
    location = _clean(location, "location")
    author = _clean(author, "author")
    content = _clean(content, "content")
    if len(content) > settings.max_tip_chars:
        raise ValueError(f"Tip too long; limit {settings.max_tip_chars} characters.")
    tip = _store.add_tip(location, author, content, category)
    logger.info("Stored community tip", extra={"tip_id": tip.id, "location": location})
    return tip


def list_tips(location: str) -> List[LocalTip]:
    """List a location's tips, newest first."""
    return _store.list_tips(location)


def get_tip(tip_id: str) -> Optional[LocalTip]:
    return _store.get_tip(tip_id)


def like_tip(tip_id: str) -> Optional[LocalTip]:
    """Add one like; None if the tip does not exist."""
    return _store.like_tip(tip_id)


def delete_tip(tip_id: str) -> bool:
    return _store.delete_tip(tip_id)


def clear_tips():
    """Clear all tips from the backing store (dev/testing)."""
    return _store.clear()
