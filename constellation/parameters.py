"""Live adjustment of link-force parameters."""

import logging
import random
from collections.abc import Callable, Sequence

from constellation.config import LayoutConfig
from constellation.layout.base import LayoutEngine
from constellation.layout.force import LinkForce
from constellation.models import Edge

logger = logging.getLogger(__name__)


class SimulationParameterManager:
    """Owns link distance/strength and restarts the layout when they change.

    ``edges`` is read on each restart so the rebuilt link force always uses
    the controller's current edge set.
    """

    def __init__(
        self,
        layout: LayoutEngine,
        config: LayoutConfig,
        edges: Callable[[], Sequence[Edge]],
        rng: random.Random | None = None,
    ) -> None:
        self.layout = layout
        self.config = config
        self.link_distance = config.link_distance
        self.link_strength = config.link_strength
        self.distance_factor = config.distance_factor
        self.strength_factor = config.strength_factor
        self._edges = edges
        self._rng = rng

    def link_force(self, edges: Sequence[Edge]) -> LinkForce:
        return LinkForce(edges, distance=self.link_distance, strength=self.link_strength, rng=self._rng)

    def increase_distance(self) -> None:
        self._modify_distance(True)

    def decrease_distance(self) -> None:
        self._modify_distance(False)

    def increase_strength(self) -> None:
        self._modify_strength(True)

    def decrease_strength(self) -> None:
        self._modify_strength(False)

    def _modify_distance(self, increase: bool) -> None:
        if increase:
            self.link_distance *= self.distance_factor
        else:
            self.link_distance /= self.distance_factor
        logger.debug("linkDistance is %s", self.link_distance)
        self.restart_force("link")

    def _modify_strength(self, increase: bool) -> None:
        if increase:
            self.link_strength *= self.strength_factor
        else:
            self.link_strength /= self.strength_factor
        logger.debug("linkStrength is %s", self.link_strength)
        self.restart_force("link")

    def restart_force(self, name: str) -> bool:
        """Rebuild the named force, then reheat.

        Only ``"link"`` is rebuilt; any other name just reheats.
        """
        if name == "link":
            self.layout.force("link", self.link_force(self._edges()))
        return self.reheat()

    def reheat(self) -> bool:
        """Reset alpha to the reheat value and restart, even from rest.

        Alpha only approaches ``alpha_target`` and never reaches it, so a
        stopped layout still sits above its target and is woken too.
        """
        if self.layout.alpha > self.layout.alpha_target:
            self.layout.alpha = self.config.alpha_reheat
            self.layout.restart()
            return True
        return False
