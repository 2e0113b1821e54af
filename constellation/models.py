"""Pydantic models for the constellation catalogue and subgraph."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    nicename: str


class ImageRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str


class Badge(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str | None = None


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str | None = None
    target: str | None = None


# --- Catalogue records (what comes out of the data file) ---


class Item(BaseModel):
    """One catalogue record. Never mutated after load."""
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    artist: str | None = None
    category: Category
    image: ImageRef
    badge: Badge | None = None
    link: Link | None = None
    related: tuple[int, ...] = Field(default_factory=tuple)

    @field_validator("related", mode="before")
    @classmethod
    def _null_related(cls, value):
        return () if value is None else value


class CatalogueFile(BaseModel):
    """Top-level shape of the catalogue JSON: ``{"record": [...]}``."""
    record: list[Item]


# --- Layout state ---


class BoundingBox(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Node:
    """An item admitted to the layout, plus its mutable layout state.

    Position fields stay ``None`` until the layout engine (or the controller)
    places the node.
    """

    __slots__ = (
        "item", "x", "y", "vx", "vy", "fx", "fy", "index", "bounding_box",
    )

    def __init__(self, item: Item) -> None:
        self.item = item
        self.x: float | None = None
        self.y: float | None = None
        self.vx: float | None = None
        self.vy: float | None = None
        self.fx: float | None = None
        self.fy: float | None = None
        self.index: int | None = None
        self.bounding_box: BoundingBox | None = None

    @property
    def id(self) -> int:
        return self.item.id

    @property
    def related(self) -> tuple[int, ...]:
        return self.item.related

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def __repr__(self) -> str:
        return f"Node({self.id}, x={self.x}, y={self.y})"


class Viewport:
    """Drawing area size; changes on resize."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    @property
    def centre(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height


class Edge(BaseModel):
    """A link between two nodes, addressed by index into the current node list."""
    model_config = ConfigDict(frozen=True)

    source: int
    target: int

    @property
    def key(self) -> str:
        """Canonical unordered-pair key, e.g. ``"2-5"`` for both 2->5 and 5->2."""
        low, high = sorted((self.source, self.target))
        return f"{low}-{high}"


class Scene(BaseModel):
    """What a render adapter needs to draw one frame."""

    class NodeView(BaseModel):
        id: int
        title: str
        x: float
        y: float
        classes: str

    nodes: list[NodeView]
    edges: list[tuple[int, int]]  # pairs of item ids
    width: float
    height: float
    pinned_id: int | None = None
    centre_id: int | None = None
    debug: bool = False
    night_mode: bool = False
    touch_enabled: bool = False
