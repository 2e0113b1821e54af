"""Shared test fixtures for constellation tests."""

import json
import random

import pytest

from constellation.app import Constellation
from constellation.config import AnimationConfig, Config, PresentationConfig, SubgraphConfig
from constellation.models import Item
from constellation.output.recorder import RecordingRenderer
from constellation.sampler import Sampler


def make_item(item_id: int, related: list[int] | None = None, **extra) -> Item:
    data = {
        "id": item_id,
        "title": f"Item {item_id}",
        "category": {"name": "Drawing", "nicename": "drawing"},
        "image": {"url": f"/img/{item_id}.png"},
        **extra,
    }
    if related is not None:
        data["related"] = related
    return Item(**data)


@pytest.fixture()
def sampler():
    return Sampler(random.Random(1234))


@pytest.fixture()
def five_items():
    """Two clusters: {1, 2, 3} fully connected, {4, 5} a pair."""
    return [
        make_item(1, [2, 3]),
        make_item(2, [1, 3]),
        make_item(3, [1, 2]),
        make_item(4, [5]),
        make_item(5, [4]),
    ]


@pytest.fixture()
def ring_items():
    """Forty items, each related to its four nearest neighbours on a ring."""
    n = 40
    return [
        make_item(i, [(i + d) % n for d in (-2, -1, 1, 2)])
        for i in range(n)
    ]


@pytest.fixture()
def small_config():
    return Config(
        subgraph=SubgraphConfig(max_nodes=3, max_edges_per_node=3, max_edges=10),
        presentation=PresentationConfig(night_mode_frequency=0.0),
    )


@pytest.fixture()
def config():
    return Config(
        subgraph=SubgraphConfig(max_nodes=8),
        animation=AnimationConfig(),
        presentation=PresentationConfig(night_mode_frequency=0.0),
    )


@pytest.fixture()
def renderer():
    return RecordingRenderer()


@pytest.fixture()
def ring_app(ring_items, config, renderer):
    """Started session over the ring catalogue, one frame in."""
    app = Constellation(ring_items, config, renderer, seed=7)
    app.start()
    app.frame()
    return app


@pytest.fixture()
def catalogue_file(tmp_path, five_items):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"record": [item.model_dump() for item in five_items]}))
    return path
