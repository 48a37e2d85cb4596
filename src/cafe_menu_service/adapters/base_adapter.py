"""Base adapter for menu acquisition stages.

This module defines the abstract base class that every acquisition strategy
implements. Following the same pattern as the rest of the service, adapters use
simple return values (None) for expected failures rather than raising
exceptions; the orchestrator decides what happens next.
"""

from abc import ABC, abstractmethod

from cafe_menu_service.models.menu_models import MenuItem, MenuSource


class MenuSourceAdapter(ABC):
    """Abstract base class for menu acquisition adapters.

    Each adapter wraps one way of getting menu data out of the upstream site
    (JSON endpoints, a rendered browser session, raw HTML).

    The adapter follows a simple error handling pattern:
    - fetch_items returns None on transport errors, timeouts or unknown shapes
    - fetch_items may return an empty list when the source had nothing to offer
    - The orchestration layer treats both as a failed stage and moves on
    """

    def __init__(self, source: MenuSource) -> None:
        """Initialize the adapter.

        Args:
            source: Stage tag stamped on snapshots this adapter produces
        """
        self.source = source

    @abstractmethod
    async def fetch_items(self) -> list[MenuItem] | None:
        """Acquire and normalize menu items from the upstream source.

        Returns:
            list: Normalized menu items in discovery order, or None on failure

        Note:
            Implementations must make exactly one attempt per call; there is
            no retry at this level.
        """
        pass
