"""Configuration loading for constellation."""

import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` rounds to even)."""
    return int(math.floor(value + 0.5))


class CatalogueConfig(BaseModel):
    source: str = "assets/data/data.json"  # URL or local path
    timeout: float = 10.0

    @property
    def resolved_source(self) -> str:
        """URLs as-is; relative paths resolved against the project root."""
        if self.source.startswith(("http://", "https://")):
            return self.source
        p = Path(self.source).expanduser()
        if p.is_absolute():
            return str(p)
        return str(_project_root() / p)


class SubgraphConfig(BaseModel):
    max_nodes: int = 18
    max_edges_per_node: int = 3  # source and target each cull their own relations
    max_edges: int | None = None
    related_nodes_ratio: float = 0.6

    @property
    def resolved_max_edges(self) -> int:
        """Edge cap; defaults to half the per-node budget across all nodes."""
        if self.max_edges is not None:
            return self.max_edges
        return round_half_up(self.max_edges_per_node * self.max_nodes * 0.5)

    @property
    def related_quota(self) -> int:
        return round_half_up(self.max_nodes * self.related_nodes_ratio)


class LayoutConfig(BaseModel):
    body_charge: float = -50.0
    link_distance: float = 120.0
    link_strength: float = 0.1
    alpha_decay: float = 0.00912  # d3 default 0.0228
    velocity_decay: float = 0.3  # d3 default 0.4
    alpha_reheat: float = 0.075
    centre_radius: float = 100.0
    distance_factor: float = 2.0
    strength_factor: float = 8.0


class AnimationConfig(BaseModel):
    damping: float = 16.0
    convergence_threshold: float = 0.1


class ViewportConfig(BaseModel):
    width: float = 500.0
    height: float = 500.0


class PresentationConfig(BaseModel):
    debug: bool = False
    night_mode_frequency: float = 0.1
    image_size: int = 50
    text_offset: tuple[float, float] = (20.0, 40.0)


class Config(BaseModel):
    catalogue: CatalogueConfig = Field(default_factory=CatalogueConfig)
    subgraph: SubgraphConfig = Field(default_factory=SubgraphConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)


def _project_root() -> Path:
    """Return the constellation project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
