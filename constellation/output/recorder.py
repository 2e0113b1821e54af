"""Render adapter that keeps the last scene in memory."""

from collections.abc import Sequence

from constellation.models import Edge, Node, Scene
from constellation.output.base import RenderAdapter


class RecordingRenderer(RenderAdapter):
    """Records structure changes and the most recent scene."""

    def __init__(self) -> None:
        self.structure_changes = 0
        self.redraws = 0
        self.node_ids: list[int] = []
        self.edge_count = 0
        self.last_scene: Scene | None = None

    def structure_changed(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        self.structure_changes += 1
        self.node_ids = [n.id for n in nodes]
        self.edge_count = len(edges)

    def redraw(self, scene: Scene) -> None:
        self.redraws += 1
        self.last_scene = scene

    def __repr__(self) -> str:
        return (
            f"RecordingRenderer({len(self.node_ids)} nodes, {self.edge_count} edges, "
            f"{self.structure_changes} rebuilds, {self.redraws} redraws)"
        )
