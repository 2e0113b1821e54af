"""Presentation helpers: labels, navigation targets, CSS classes, deep links."""

import html
from collections.abc import Sequence

from constellation.models import Edge, Item, Node, Scene, Viewport
from constellation.selection import SelectionState


def label_html(item: Item) -> str:
    """HTML for a node label. Optional fields are skipped when absent."""
    out = f"<strong>{html.escape(item.title)}</strong>"
    if item.artist:
        out += f"<p>{html.escape(item.artist)}"
    if item.badge and item.badge.url:
        out += (
            f"<img class='badge' alt='{html.escape(item.category.name, quote=True)}' "
            f"src='{html.escape(item.badge.url, quote=True)}'>"
        )
    if item.artist:
        out += "</p>"
    return out


def detail_url(item: Item) -> str:
    """Where a label click navigates to."""
    if item.link and item.link.url and item.link.target == "_blank":
        return item.link.url
    return f"/record/{item.category.nicename}/{item.id}"


def node_classes(node_id: int, pinned_id: int | None, centre_id: int | None) -> str:
    classes = ["node", f"node-variation-{node_id % 10}"]
    if node_id == pinned_id:
        classes.append("node-pinned")
    if node_id == centre_id:
        classes.append("node-centre")
    return " ".join(classes)


def parse_deep_link(fragment: str | None) -> int | None:
    """``"#173"`` -> 173. Anything that is not an integer id gives None."""
    if not fragment:
        return None
    value = fragment.lstrip("#").strip()
    try:
        return int(value)
    except ValueError:
        return None


def build_scene(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    viewport: Viewport,
    selection: SelectionState,
    *,
    debug: bool = False,
    night_mode: bool = False,
    touch_enabled: bool = False,
) -> Scene:
    """Snapshot the positioned nodes and id-addressed edges for a renderer."""
    views = [
        Scene.NodeView(
            id=n.id,
            title=n.item.title,
            x=n.x,
            y=n.y,
            classes=node_classes(n.id, selection.pinned_id, selection.centre_id),
        )
        for n in nodes
        if n.has_position
    ]
    pairs = [
        (nodes[e.source].id, nodes[e.target].id)
        for e in edges
        if e.source < len(nodes) and e.target < len(nodes)
    ]
    return Scene(
        nodes=views,
        edges=pairs,
        width=viewport.width,
        height=viewport.height,
        pinned_id=selection.pinned_id,
        centre_id=selection.centre_id,
        debug=debug,
        night_mode=night_mode,
        touch_enabled=touch_enabled,
    )
