"""Pinned and centre node tracking."""

import logging

from constellation.layout.base import LayoutEngine
from constellation.scheduler import CancelToken

logger = logging.getLogger(__name__)


class SelectionState:
    """Which node is pinned (animating to centre) and which is nearest centre.

    Every ``pin`` issues a new token and cancels the previous one, so at most
    one centring is live per click.
    """

    def __init__(self) -> None:
        self.pinned_id: int | None = None
        self.centre_id: int | None = None
        self.token: CancelToken | None = None
        self._generation = 0

    def pin(self, item_id: int) -> CancelToken:
        if self.token is not None:
            self.token.cancel()
        self._generation += 1
        self.pinned_id = item_id
        self.token = CancelToken(self._generation)
        return self.token

    def release(self, token: CancelToken) -> bool:
        """Clear the pin if ``token`` is still the current one."""
        if token is not self.token or token.cancelled:
            return False
        self.pinned_id = None
        self.token = None
        return True

    def update_centre(self, layout: LayoutEngine, x: float, y: float, radius: float) -> int | None:
        """Mark the node nearest ``(x, y)`` as centre (even if it isn't pinned)."""
        node = layout.find(x, y, radius)
        if node is not None:
            if node.id != self.centre_id:
                logger.debug("Find found node %d", node.id)
            self.centre_id = node.id
        return self.centre_id
