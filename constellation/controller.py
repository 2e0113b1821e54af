"""Subgraph selection: initial sample and click-driven resampling."""

import logging
import random
from collections.abc import Sequence

from constellation.config import LayoutConfig, SubgraphConfig
from constellation.edges import build_edges
from constellation.errors import UnknownItemError
from constellation.layout.base import LayoutEngine
from constellation.layout.force import CenterForce, CollideForce, ManyBodyForce
from constellation.models import Edge, Item, Node, Viewport
from constellation.output.base import RenderAdapter
from constellation.parameters import SimulationParameterManager
from constellation.sampler import Sampler, dedupe_by_id, find_item, related_of
from constellation.selection import SelectionState

logger = logging.getLogger(__name__)


class SubgraphController:
    """Keeps a bounded working set of nodes and the edges between them.

    Node objects are created once per item id and reused, so an item that
    drops out of the subgraph and later returns keeps its last position.
    """

    def __init__(
        self,
        catalogue: Sequence[Item],
        sampler: Sampler,
        layout: LayoutEngine,
        selection: SelectionState,
        viewport: Viewport,
        renderer: RenderAdapter,
        parameters: SimulationParameterManager,
        subgraph: SubgraphConfig,
        layout_config: LayoutConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.catalogue = catalogue
        self.sampler = sampler
        self.layout = layout
        self.selection = selection
        self.viewport = viewport
        self.renderer = renderer
        self.parameters = parameters
        self.max_nodes = subgraph.max_nodes
        self.max_edges_per_node = subgraph.max_edges_per_node
        self.max_edges = subgraph.resolved_max_edges
        self.related_quota = subgraph.related_quota
        self.layout_config = layout_config
        self.current_nodes: list[Node] = []
        self.edges: list[Edge] = []
        self._rng = rng
        self._node_cache: dict[int, Node] = {}

    def node_for(self, item: Item) -> Node:
        node = self._node_cache.get(item.id)
        if node is None:
            node = Node(item)
            self._node_cache[item.id] = node
        return node

    def nodes_for(self, items: Sequence[Item]) -> list[Node]:
        return [self.node_for(item) for item in items]

    def get_node(self, item_id: int) -> Node:
        return self.node_for(find_item(item_id, self.catalogue))

    def initial_sample(self, deep_link: int | None = None) -> list[Node]:
        """Pick the first working set and start the layout on it.

        With a deep link the target is appended after culling, so the set can
        hold ``max_nodes + 1`` nodes.
        """
        items = self._initial_items(deep_link)
        if deep_link is not None:
            logger.debug("Received %d nodes related to %d.", len(items), deep_link)
        else:
            logger.debug("Received %d random nodes.", len(items))

        self.current_nodes = self.nodes_for(items)
        self.edges = self._build_edges()
        logger.debug("Found %d edges.", len(self.edges))
        self._install()
        return self.current_nodes

    def _initial_items(self, deep_link: int | None) -> list[Item]:
        if deep_link is not None:
            try:
                target = find_item(deep_link, self.catalogue)
            except UnknownItemError:
                logger.warning("Deep link %d is not in the catalogue; sampling at random", deep_link)
            else:
                related = related_of(deep_link, self.catalogue)
                if len(related) < 2:
                    return self.sampler.cull(self.catalogue, self.max_nodes - 1, preserve=target)
                return self.sampler.cull(related, self.max_nodes, preserve=target)
        return self.sampler.cull(self.catalogue, self.max_nodes)

    def resample(self, clicked: Node) -> list[Node]:
        """Pin ``clicked`` and rebuild the working set around its relations.

        The clicked node always survives and the result never exceeds
        ``max_nodes``.
        """
        logger.debug("Node %d clicked.", clicked.id)
        self.selection.pin(clicked.id)

        related = self.sampler.cull(self.nodes_for(related_of(clicked.id, self.catalogue)), self.related_quota)

        # Newcomers animate in from the middle rather than the origin.
        cx, cy = self.viewport.centre
        for node in related:
            if not node.has_position:
                node.x = cx
                node.y = cy

        logger.debug("%d nodes before culling.", len(self.current_nodes))
        retained = self.sampler.cull(self.current_nodes, self.max_nodes - len(related), preserve=clicked)
        logger.debug("%d nodes after culling.", len(retained))

        merged = dedupe_by_id(retained + related)
        logger.debug("%d unique nodes.", len(merged))
        if len(merged) > self.max_nodes:
            merged = self.sampler.cull(merged, self.max_nodes, preserve=clicked)

        self.current_nodes = merged
        self.edges = self._build_edges()
        self._install()
        logger.debug("Simulation now has %d nodes.", len(self.layout.nodes))

        self.parameters.reheat()
        return self.current_nodes

    def _build_edges(self) -> list[Edge]:
        return build_edges(self.current_nodes, self.max_edges_per_node, self.max_edges, self.sampler)

    def _install(self) -> None:
        """Hand nodes/edges to the layout and renderer, recreating every force."""
        cx, cy = self.viewport.centre
        # Old link indices are meaningless against the new node list.
        self.layout.force("link", None)
        self.layout.set_nodes(self.current_nodes)
        self.layout.force("charge", ManyBodyForce(self.layout_config.body_charge, rng=self._rng))
        self.layout.force("center", CenterForce(cx, cy))
        self.layout.force("collide", CollideForce(rng=self._rng))
        self.layout.force("link", self.parameters.link_force(self.edges))
        self.layout.alpha_decay = self.layout_config.alpha_decay
        self.layout.velocity_decay = self.layout_config.velocity_decay
        self.renderer.structure_changed(self.current_nodes, self.edges)
