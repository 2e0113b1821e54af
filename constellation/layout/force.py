"""Force simulation with d3-force semantics, vectorised with numpy.

Energy (``alpha``) decays towards ``alpha_target`` by ``alpha_decay`` per
tick; the simulation stops once alpha drops below ``alpha_min``. Each tick
copies node state into ``(n, 2)`` position and velocity arrays, lets every
force update them, damps velocities by ``velocity_decay``, integrates, and
writes the result back to the nodes. Fixed nodes (``fx``/``fy``) are pinned
with zero velocity.
"""

import logging
import math
import random
from collections.abc import Callable, Sequence

import numpy as np

from constellation.layout.base import Force, LayoutEngine
from constellation.models import Edge, Node

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))
JIGGLE = 1e-6


def _jiggle_zeros(delta: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Replace exact zero offsets with tiny random ones so coincident nodes separate."""
    zeros = delta == 0
    if zeros.any():
        delta = delta.copy()
        delta[zeros] = (rng.random(int(zeros.sum())) - 0.5) * JIGGLE
    return delta


def _pairwise(pos: np.ndarray, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    """``delta[i, j] = pos[j] - pos[i]`` and squared distances, diagonal at inf."""
    delta = _jiggle_zeros(pos[np.newaxis, :, :] - pos[:, np.newaxis, :], rng)
    l2 = np.sum(delta * delta, axis=-1)
    np.fill_diagonal(l2, np.inf)
    return delta, l2


class ManyBodyForce(Force):
    """Pairwise charge; negative strength repels."""

    def __init__(self, strength: float = -30.0, distance_min: float = 1.0, rng: random.Random | None = None) -> None:
        self.strength = strength
        self.distance_min2 = distance_min * distance_min
        self.rng = np.random.default_rng((rng or random.Random()).getrandbits(32))

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
        if len(pos) < 2:
            return
        delta, l2 = _pairwise(pos, self.rng)
        l2 = np.where(l2 < self.distance_min2, np.sqrt(self.distance_min2 * l2), l2)
        vel += np.sum(delta * (self.strength * alpha / l2)[..., np.newaxis], axis=1)


class CenterForce(Force):
    """Translates all nodes so their mean position sits on ``(x, y)``."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
        if not len(pos):
            return
        pos -= (pos.mean(axis=0) - (self.x, self.y)) * self.strength


class CollideForce(Force):
    """Pushes apart nodes whose circles of ``radius`` overlap."""

    def __init__(self, radius: float = 1.0, strength: float = 1.0, rng: random.Random | None = None) -> None:
        self.radius = radius
        self.strength = strength
        self.rng = np.random.default_rng((rng or random.Random()).getrandbits(32))

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
        if len(pos) < 2:
            return
        r = self.radius * 2
        # Offsets point from j to i, measured at the predicted next positions.
        delta, l2 = _pairwise(pos + vel, self.rng)
        delta = -delta
        overlap = l2 < r * r
        if not overlap.any():
            return
        length = np.sqrt(np.where(overlap, l2, 1.0))
        scale = np.where(overlap, (r - length) / length * self.strength, 0.0)
        # Equal radii, so each node of a pair takes half the push.
        vel += np.sum(delta * scale[..., np.newaxis], axis=1) * 0.5


class LinkForce(Force):
    """Springs between linked nodes, biased towards the less connected end."""

    def __init__(
        self,
        links: Sequence[Edge] = (),
        distance: float = 30.0,
        strength: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        self.links = list(links)
        self.distance = distance
        self.strength = strength
        self.rng = np.random.default_rng((rng or random.Random()).getrandbits(32))
        self._source = np.zeros(0, dtype=int)
        self._target = np.zeros(0, dtype=int)
        self._bias = np.zeros(0)

    def initialize(self, nodes: Sequence[Node]) -> None:
        pairs = [(link.source, link.target) for link in self.links if link.source != link.target]
        if not pairs:
            self._source = self._target = np.zeros(0, dtype=int)
            self._bias = np.zeros(0)
            return
        self._source, self._target = (np.array(side, dtype=int) for side in zip(*pairs))
        count = np.bincount(np.concatenate([self._source, self._target]), minlength=len(nodes))
        self._bias = count[self._source] / (count[self._source] + count[self._target])

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
        if not len(self._source):
            return
        ahead = pos + vel
        d = _jiggle_zeros(ahead[self._target] - ahead[self._source], self.rng)
        length = np.linalg.norm(d, axis=1)
        f = d * ((length - self.distance) / length * alpha * self.strength)[:, np.newaxis]
        np.add.at(vel, self._target, -f * self._bias[:, np.newaxis])
        np.add.at(vel, self._source, f * (1 - self._bias)[:, np.newaxis])


class ForceSimulation(LayoutEngine):
    """Headless stand-in for a d3 force simulation."""

    def __init__(self, nodes: Sequence[Node] = (), rng: random.Random | None = None) -> None:
        self.alpha = 1.0
        self.alpha_min = 0.001
        self.alpha_target = 0.0
        self.alpha_decay = 1 - math.pow(self.alpha_min, 1 / 300)
        self.velocity_decay = 0.4
        self.rng = rng or random.Random()
        self.ticks = 0
        self._nodes: list[Node] = []
        self._forces: dict[str, Force] = {}
        self._running = True
        self._tick_listeners: list[Callable[[], None]] = []
        self._end_listeners: list[Callable[[], None]] = []
        self.set_nodes(nodes)

    @property
    def nodes(self) -> list[Node]:
        return self._nodes

    def set_nodes(self, nodes: Sequence[Node]) -> None:
        self._nodes = list(nodes)
        for i, node in enumerate(self._nodes):
            node.index = i
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if node.x is None or node.y is None:
                # Phyllotaxis arrangement, as d3 does.
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = radius * math.cos(angle)
                node.y = radius * math.sin(angle)
            if node.vx is None or node.vy is None:
                node.vx = 0.0
                node.vy = 0.0
        for force in self._forces.values():
            force.initialize(self._nodes)

    def force(self, name: str, force: Force | None) -> None:
        if force is None:
            self._forces.pop(name, None)
            return
        force.initialize(self._nodes)
        self._forces[name] = force

    def get_force(self, name: str) -> Force | None:
        return self._forces.get(name)

    @property
    def running(self) -> bool:
        return self._running

    def restart(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def tick(self) -> None:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        self.ticks += 1
        if not self._nodes:
            return

        pos = np.array([(node.x, node.y) for node in self._nodes], dtype=float)
        vel = np.array([(node.vx, node.vy) for node in self._nodes], dtype=float)
        fixed = np.array(
            [(np.nan if node.fx is None else node.fx, np.nan if node.fy is None else node.fy) for node in self._nodes],
            dtype=float,
        )

        for force in self._forces.values():
            force.apply(pos, vel, self.alpha)

        vel *= 1 - self.velocity_decay
        pos += vel
        pinned = ~np.isnan(fixed)
        pos[pinned] = fixed[pinned]
        vel[pinned] = 0.0

        for node, (x, y), (vx, vy) in zip(self._nodes, pos.tolist(), vel.tolist()):
            node.x, node.y = x, y
            node.vx, node.vy = vx, vy

    def step(self) -> bool:
        if not self._running:
            return False
        self.tick()
        for callback in self._tick_listeners:
            callback()
        if self.alpha < self.alpha_min:
            logger.debug("Simulation settled after %d ticks.", self.ticks)
            self._running = False
            for callback in self._end_listeners:
                callback()
        return True

    def find(self, x: float, y: float, radius: float | None = None) -> Node | None:
        if not self._nodes:
            return None
        pos = np.array([(node.x, node.y) for node in self._nodes], dtype=float)
        d2 = np.sum((pos - (x, y)) ** 2, axis=1)
        best = int(np.argmin(d2))
        if radius is not None and d2[best] >= radius * radius:
            return None
        return self._nodes[best]

    def on_tick(self, callback: Callable[[], None]) -> None:
        self._tick_listeners.append(callback)

    def on_end(self, callback: Callable[[], None]) -> None:
        self._end_listeners.append(callback)
