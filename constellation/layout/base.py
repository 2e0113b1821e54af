"""Base layout engine interface."""

import abc
from collections.abc import Callable, Sequence

import numpy as np

from constellation.models import Node


class Force(abc.ABC):
    """A force applied once per tick.

    ``pos`` and ``vel`` are ``(n, 2)`` arrays in node-index order; forces
    update them in place.
    """

    def initialize(self, nodes: Sequence[Node]) -> None:
        """Called whenever the engine's node list is replaced."""

    @abc.abstractmethod
    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
        ...


class LayoutEngine(abc.ABC):
    """A physics-style simulation that owns node positions.

    The core configures forces and energy ("alpha") and reacts to tick
    callbacks; it never moves nodes through the engine directly.
    """

    alpha: float
    alpha_min: float
    alpha_target: float
    alpha_decay: float
    velocity_decay: float

    @property
    @abc.abstractmethod
    def nodes(self) -> list[Node]:
        ...

    @abc.abstractmethod
    def set_nodes(self, nodes: Sequence[Node]) -> None:
        """Replace the tracked node list and re-initialise every force."""
        ...

    @abc.abstractmethod
    def force(self, name: str, force: Force | None) -> None:
        """Install (or with ``None`` remove) a named force."""
        ...

    @abc.abstractmethod
    def get_force(self, name: str) -> Force | None:
        ...

    @property
    @abc.abstractmethod
    def running(self) -> bool:
        ...

    @abc.abstractmethod
    def restart(self) -> None:
        ...

    @abc.abstractmethod
    def stop(self) -> None:
        ...

    @abc.abstractmethod
    def step(self) -> bool:
        """Advance one tick if running. Returns whether a tick happened."""
        ...

    @abc.abstractmethod
    def find(self, x: float, y: float, radius: float | None = None) -> Node | None:
        """Nearest node to ``(x, y)``, optionally within ``radius``."""
        ...

    @abc.abstractmethod
    def on_tick(self, callback: Callable[[], None]) -> None:
        ...

    @abc.abstractmethod
    def on_end(self, callback: Callable[[], None]) -> None:
        ...
