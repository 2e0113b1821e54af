"""PNG snapshots of the live subgraph, drawn with PIL.

Edges are straight lines, nodes are discs coloured by ``id % 10`` (the same
variation the label classes use), with rings for the pinned and centre nodes.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from constellation.models import Edge, Node, Scene
from constellation.output.base import RenderAdapter

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(_FONT_REGULAR, size)
    except OSError:
        return ImageFont.load_default()


# --- Colors ---

DAY = {
    "bg": (250, 248, 242),
    "edge": (180, 176, 168),
    "text": (40, 40, 40),
    "pinned": (220, 60, 40),
    "centre": (40, 120, 220),
}
NIGHT = {
    "bg": (13, 17, 23),
    "edge": (72, 78, 88),
    "text": (230, 237, 243),
    "pinned": (255, 123, 114),
    "centre": (88, 166, 255),
}

VARIATIONS: list[tuple[int, int, int]] = [
    (230, 159, 0),
    (86, 180, 233),
    (0, 158, 115),
    (240, 228, 66),
    (0, 114, 178),
    (213, 94, 0),
    (204, 121, 167),
    (120, 120, 120),
    (153, 102, 51),
    (102, 153, 102),
]


class SnapshotRenderer(RenderAdapter):
    """Writes every ``every``-th redraw to ``output_dir/frame-NNNNN.png``."""

    def __init__(self, output_dir: Path, every: int = 1, node_radius: int = 12, labels: bool = True) -> None:
        self.output_dir = output_dir
        self.every = max(every, 1)
        self.node_radius = node_radius
        self.labels = labels
        self.redraws = 0
        self.written: list[Path] = []
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def structure_changed(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        logger.debug("Snapshot structure: %d nodes, %d edges", len(nodes), len(edges))

    def redraw(self, scene: Scene) -> None:
        self.redraws += 1
        if (self.redraws - 1) % self.every:
            return
        path = self.output_dir / f"frame-{self.redraws:05d}.png"
        self.render(scene).save(path)
        self.written.append(path)

    def render(self, scene: Scene) -> Image.Image:
        palette = NIGHT if scene.night_mode else DAY
        width, height = max(int(scene.width), 1), max(int(scene.height), 1)
        img = Image.new("RGB", (width, height), palette["bg"])
        draw = ImageDraw.Draw(img)
        font = _font(11)

        positions = {n.id: (n.x, n.y) for n in scene.nodes}
        for a, b in scene.edges:
            if a in positions and b in positions:
                draw.line([positions[a], positions[b]], fill=palette["edge"], width=1)

        r = self.node_radius
        for n in scene.nodes:
            fill = VARIATIONS[n.id % len(VARIATIONS)]
            draw.ellipse([n.x - r, n.y - r, n.x + r, n.y + r], fill=fill)
            if n.id == scene.pinned_id:
                draw.ellipse([n.x - r - 4, n.y - r - 4, n.x + r + 4, n.y + r + 4], outline=palette["pinned"], width=2)
            if n.id == scene.centre_id:
                draw.ellipse([n.x - r - 8, n.y - r - 8, n.x + r + 8, n.y + r + 8], outline=palette["centre"], width=1)
            # Touch layouts always show labels; otherwise only the centre node's.
            if self.labels and (scene.touch_enabled or n.id == scene.centre_id or scene.debug):
                draw.text((n.x + r + 4, n.y - 6), n.title, fill=palette["text"], font=font)
            if scene.debug:
                draw.text((n.x - r, n.y + r + 2), str(n.id), fill=palette["text"], font=font)

        return img
