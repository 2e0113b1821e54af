"""Animate a pinned node to the centre of the viewport."""

import logging
from collections.abc import Callable

from constellation.config import AnimationConfig
from constellation.models import Node, Viewport
from constellation.scheduler import CancelToken, FrameScheduler, FrameTask
from constellation.selection import SelectionState

logger = logging.getLogger(__name__)


class PinAnimator:
    """Moves the pinned node a fixed fraction of the way to centre each frame.

    A centring ends in one of two ways: its token is cancelled by a newer pin
    (exit without converging) or the remaining offset drops to the
    convergence threshold (snap, release the pin, redraw once).
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        selection: SelectionState,
        viewport: Viewport,
        config: AnimationConfig,
        redraw: Callable[[], None],
    ) -> None:
        self.scheduler = scheduler
        self.selection = selection
        self.viewport = viewport
        self.damping = config.damping
        self.threshold = config.convergence_threshold
        self.redraw = redraw

    def centre(self, node: Node, token: CancelToken | None = None) -> CancelToken:
        """Start centring ``node`` under the current pin token."""
        if token is None:
            token = self.selection.token
        if token is None or self.selection.pinned_id != node.id:
            token = self.selection.pin(node.id)
        logger.debug("Centring pinned node %r.", node.item.title)
        self.scheduler.spawn(self.centring(node, token))
        return token

    def centring(self, node: Node, token: CancelToken) -> FrameTask:
        while True:
            if token.cancelled:
                logger.debug("Centring of %d has stopped.", node.id)
                self.redraw()
                return

            tx, ty = self.viewport.centre
            dx = tx - node.x
            dy = ty - node.y
            node.x += dx / self.damping
            node.y += dy / self.damping
            # Manual moves replace the engine's motion for this node.
            node.vx = 0.0
            node.vy = 0.0

            if abs(dx) <= self.threshold and abs(dy) <= self.threshold:
                node.x = tx
                node.y = ty
                self.selection.release(token)
                self.redraw()
                logger.debug("Centre of %d has been achieved.", node.id)
                return
            yield

    def fix_to_centre(self, node: Node) -> None:
        """Hold ``node`` at the centre; the layout will not move it."""
        node.fx, node.fy = self.viewport.centre

    def release_fixed(self, node: Node) -> None:
        node.fx = None
        node.fy = None
