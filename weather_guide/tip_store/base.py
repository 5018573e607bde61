"""Shared protocol for community tip storage backends."""

from typing import List, Optional, Protocol

from weather_guide.domain import LocalTip, TipCategory


class TipStore(Protocol):
    """Protocol for tip board storage backends."""
    def add_tip(
        self,
        location: str,
        author: str,
        content: str,
        category: TipCategory = TipCategory.GENERAL,
    ) -> LocalTip:
        """Persist a new tip and return it with its generated id."""

    def list_tips(self, location: str) -> List[LocalTip]:
        """Return tips for a location, newest first."""

    def get_tip(self, tip_id: str) -> Optional[LocalTip]:
        """Fetch a tip by id, returning None if missing."""

    def like_tip(self, tip_id: str) -> Optional[LocalTip]:
        """Increment a tip's like count; None if the id is unknown."""

    def delete_tip(self, tip_id: str) -> bool:
        """Delete a tip, returning whether it existed."""

    def clear(self) -> None:
        """Clear all stored tips."""
