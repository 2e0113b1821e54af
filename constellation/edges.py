"""Derive a deduplicated, bounded edge set from an ordered node set."""

import logging
from collections.abc import Sequence

from constellation.models import Edge, Node
from constellation.sampler import Sampler

logger = logging.getLogger(__name__)


def build_edges(
    nodes: Sequence[Node] | None,
    max_edges_per_node: int,
    max_edges_total: int,
    sampler: Sampler,
) -> list[Edge]:
    """Build edges between ``nodes`` from their ``related`` lists.

    Edge endpoints are indices into ``nodes``. Each node's relations are
    culled to ``max_edges_per_node`` before deduplication, independently per
    node, so an undirected pair can be proposed from both ends. The deduped
    list is then culled to ``max_edges_total``.
    """
    if not nodes:
        return []

    id_to_index: dict[int, int] = {}
    for index, node in enumerate(nodes):
        id_to_index.setdefault(node.id, index)

    proposed: list[Edge] = []
    for node in nodes:
        present = [rid for rid in node.related if rid in id_to_index]
        # Only place where building edges also culls.
        present = sampler.cull(present, max_edges_per_node)
        source = id_to_index[node.id]
        for rid in present:
            proposed.append(Edge(source=source, target=id_to_index[rid]))

    seen: set[str] = set()
    edges: list[Edge] = []
    for edge in proposed:
        if edge.key in seen:
            continue
        seen.add(edge.key)
        edges.append(edge)

    logger.debug("%d edges.", len(edges))
    return sampler.cull(edges, max_edges_total)
