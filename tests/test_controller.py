"""Tests for subgraph selection: initial sample and click resampling."""

import random

import pytest

from constellation.config import Config, LayoutConfig, SubgraphConfig
from constellation.controller import SubgraphController
from constellation.layout.force import ForceSimulation, LinkForce
from constellation.models import Viewport
from constellation.output.recorder import RecordingRenderer
from constellation.parameters import SimulationParameterManager
from constellation.sampler import Sampler
from constellation.selection import SelectionState


def _controller(catalogue, subgraph: SubgraphConfig, seed: int = 3, layout=None):
    rng = random.Random(seed)
    layout = layout or ForceSimulation(rng=rng)
    layout_config = LayoutConfig()
    holder: dict = {}
    parameters = SimulationParameterManager(layout, layout_config, lambda: holder["c"].edges, rng=rng)
    controller = SubgraphController(
        catalogue,
        Sampler(rng),
        layout,
        SelectionState(),
        Viewport(500, 500),
        RecordingRenderer(),
        parameters,
        subgraph,
        layout_config,
        rng=rng,
    )
    holder["c"] = controller
    return controller


def _check_edges(controller):
    n = len(controller.current_nodes)
    keys = [e.key for e in controller.edges]
    assert len(keys) == len(set(keys))
    for e in controller.edges:
        assert 0 <= e.source < n
        assert 0 <= e.target < n


class TestInitialSample:
    def test_random_sample_capped(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=8))
        nodes = c.initial_sample()
        assert len(nodes) == 8
        assert c.layout.nodes == nodes
        assert len(c.edges) <= c.max_edges
        _check_edges(c)

    def test_deep_link_includes_target(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=8))
        nodes = c.initial_sample(deep_link=10)
        ids = [n.id for n in nodes]
        assert ids[-1] == 10
        # Four related items fit under the cap, plus the target.
        assert sorted(ids[:-1]) == [8, 9, 11, 12]

    def test_deep_link_can_exceed_max_nodes(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=3))
        nodes = c.initial_sample(deep_link=10)
        assert len(nodes) == 4
        assert nodes[-1].id == 10

    def test_deep_link_with_few_relations_samples_catalogue(self, five_items):
        c = _controller(five_items, SubgraphConfig(max_nodes=3))
        nodes = c.initial_sample(deep_link=4)  # only related to 5
        assert len(nodes) == 3
        assert nodes[-1].id == 4

    def test_unknown_deep_link_falls_back(self, five_items):
        c = _controller(five_items, SubgraphConfig(max_nodes=3))
        nodes = c.initial_sample(deep_link=404)
        assert len(nodes) == 3
        assert 404 not in [n.id for n in nodes]

    def test_installs_all_forces(self, five_items):
        c = _controller(five_items, SubgraphConfig(max_nodes=5))
        c.initial_sample()
        for name in ("charge", "center", "collide", "link"):
            assert c.layout.get_force(name) is not None
        link = c.layout.get_force("link")
        assert isinstance(link, LinkForce)
        assert link.links == c.edges
        assert c.layout.alpha_decay == pytest.approx(0.00912)
        assert c.renderer.structure_changes == 1


class TestResample:
    def test_scenario_click_node_one(self, five_items):
        c = _controller(five_items, SubgraphConfig(max_nodes=3, max_edges_per_node=3, max_edges=10))
        c.initial_sample()
        clicked = c.get_node(1)
        nodes = c.resample(clicked)
        ids = {n.id for n in nodes}
        assert 1 in ids
        assert len(nodes) <= 3
        for e in c.edges:
            pair = {c.current_nodes[e.source].id, c.current_nodes[e.target].id}
            assert pair <= {1, 2, 3}
        _check_edges(c)
        assert c.selection.pinned_id == 1

    @pytest.mark.parametrize("seed", range(10))
    def test_clicked_always_present_and_capped(self, ring_items, seed):
        c = _controller(ring_items, SubgraphConfig(max_nodes=6), seed=seed)
        c.initial_sample()
        rng = random.Random(seed)
        for _ in range(15):
            clicked = rng.choice(c.current_nodes)
            nodes = c.resample(clicked)
            assert clicked.id in {n.id for n in nodes}
            assert len(nodes) <= 6
            assert len({n.id for n in nodes}) == len(nodes)
            assert len(c.edges) <= c.max_edges
            assert c.layout.nodes == nodes
            _check_edges(c)

    def test_click_on_node_outside_working_set(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=5))
        c.initial_sample()
        outside = next(n for n in c.nodes_for(ring_items) if n not in c.current_nodes)
        nodes = c.resample(outside)
        assert outside.id in {n.id for n in nodes}
        assert len(nodes) <= 5

    def test_new_related_nodes_start_at_centre(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=6))
        c.initial_sample(deep_link=0)
        clicked = c.get_node(2)
        before = {n.id: (n.x, n.y) for n in c.current_nodes}
        c.resample(clicked)
        for n in c.current_nodes:
            if n.id not in before:
                assert (n.x, n.y) == (250.0, 250.0)

    def test_positions_survive_leaving_and_returning(self, five_items):
        c = _controller(five_items, SubgraphConfig(max_nodes=3))
        node = c.get_node(4)
        node.x, node.y = 12.0, 34.0
        assert c.get_node(4) is node
        assert c.nodes_for([five_items[3]])[0] is node

    def test_isolated_click_degrades_gracefully(self):
        from tests.conftest import make_item
        catalogue = [make_item(i) for i in range(10)]
        c = _controller(catalogue, SubgraphConfig(max_nodes=4))
        c.initial_sample()
        clicked = c.current_nodes[0]
        nodes = c.resample(clicked)
        assert clicked in nodes
        assert len(nodes) == 4
        assert c.edges == []

    def test_reheats_moving_and_stopped_layouts(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=6))
        c.initial_sample()
        c.layout.alpha = 0.5
        c.resample(c.current_nodes[0])
        assert c.layout.alpha == pytest.approx(0.075)
        assert c.layout.running

        c.layout.alpha = 0.0009
        c.layout.stop()
        c.resample(c.current_nodes[0])
        assert c.layout.alpha == pytest.approx(0.075)
        assert c.layout.running

    def test_resample_notifies_renderer(self, ring_items):
        c = _controller(ring_items, SubgraphConfig(max_nodes=6))
        c.initial_sample()
        c.resample(c.current_nodes[0])
        assert c.renderer.structure_changes == 2
        assert c.renderer.node_ids == [n.id for n in c.current_nodes]

    def test_max_edges_default_from_config(self):
        assert Config().subgraph.resolved_max_edges == 27
        assert Config().subgraph.related_quota == 11
