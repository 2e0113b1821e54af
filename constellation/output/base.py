"""Base render adapter interface."""

import abc
from collections.abc import Sequence

from constellation.models import Edge, Node, Scene


class RenderAdapter(abc.ABC):
    """Draws what the core hands it. The core never draws anything itself."""

    @abc.abstractmethod
    def structure_changed(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """The working set was rebuilt: add/remove shapes for nodes and edges."""
        ...

    @abc.abstractmethod
    def redraw(self, scene: Scene) -> None:
        """Reposition every shape. Called once per layout tick."""
        ...
