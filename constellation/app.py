"""Session wiring: one context object instead of a global app instance."""

import logging
import random
from collections.abc import Sequence

from constellation.animator import PinAnimator
from constellation.config import Config
from constellation.controller import SubgraphController
from constellation.keys import dispatch_key
from constellation.layout.base import LayoutEngine
from constellation.layout.force import CenterForce, ForceSimulation
from constellation.models import Item, Node, Viewport
from constellation.output.base import RenderAdapter
from constellation.parameters import SimulationParameterManager
from constellation.presentation import build_scene, detail_url
from constellation.sampler import Sampler
from constellation.scheduler import FrameScheduler
from constellation.selection import SelectionState

logger = logging.getLogger(__name__)


class Constellation:
    """A running diagram over one loaded catalogue.

    Every external event (start, click, key, resize, label click) is posted
    to the scheduler and runs to completion at the start of the next frame,
    so a resample never interleaves with another handler.
    """

    def __init__(
        self,
        catalogue: Sequence[Item],
        config: Config,
        renderer: RenderAdapter,
        *,
        seed: int | None = None,
        layout: LayoutEngine | None = None,
        touch_enabled: bool = False,
    ) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self.sampler = Sampler(self.rng)
        self.viewport = Viewport(config.viewport.width, config.viewport.height)
        self.selection = SelectionState()
        self.scheduler = FrameScheduler()
        self.layout = layout if layout is not None else ForceSimulation(rng=self.rng)
        self.renderer = renderer

        self.debug = config.presentation.debug
        self.night_mode = False
        self.touch_enabled = touch_enabled
        self.location_hash = ""
        self.navigated_to: str | None = None

        self.parameters = SimulationParameterManager(
            self.layout, config.layout, lambda: self.controller.edges, rng=self.rng,
        )
        self.controller = SubgraphController(
            catalogue,
            self.sampler,
            self.layout,
            self.selection,
            self.viewport,
            renderer,
            self.parameters,
            config.subgraph,
            config.layout,
            rng=self.rng,
        )
        self.animator = PinAnimator(
            self.scheduler, self.selection, self.viewport, config.animation, self.redraw,
        )
        self.layout.on_tick(self.tick)

    # --- Events ---

    def start(self, deep_link: int | None = None) -> None:
        self.scheduler.post(self._on_start, deep_link)

    def click(self, node: Node) -> None:
        self.scheduler.post(self._on_click, node)

    def click_label(self, node: Node) -> None:
        self.scheduler.post(self._on_label_click, node)

    def key(self, key: str) -> None:
        self.scheduler.post(dispatch_key, self, key)

    def resize(self, width: float, height: float) -> None:
        self.scheduler.post(self._on_resize, width, height)

    # --- Handlers ---

    def _on_start(self, deep_link: int | None) -> None:
        if self.rng.random() > 1 - self.config.presentation.night_mode_frequency:
            logger.debug("Night mode is on.")
            self.night_mode = True

        if deep_link is not None:
            self.selection.pin(deep_link)
        self.controller.initial_sample(deep_link)
        self.selection.update_centre(self.layout, *self.viewport.centre, self.config.layout.centre_radius)
        self.redraw()

        pinned = self.selection.pinned_id
        if pinned is not None:
            node = next((n for n in self.controller.current_nodes if n.id == pinned), None)
            if node is None:
                self.selection.release(self.selection.token)
            else:
                self.animator.centre(node, self.selection.token)

    def _on_click(self, node: Node) -> None:
        self.location_hash = f"#{node.id}"
        self.controller.resample(node)
        self.animator.centre(node, self.selection.token)

    def _on_label_click(self, node: Node) -> None:
        self.navigated_to = detail_url(node.item)
        logger.info("Navigating to %s", self.navigated_to)

    def _on_resize(self, width: float, height: float) -> None:
        self.viewport.resize(width, height)
        self.layout.force("center", CenterForce(*self.viewport.centre))
        self.parameters.restart_force("center")

    # --- Key operations ---

    def toggle_debug(self) -> None:
        self.debug = not self.debug

    def pick_centre(self) -> None:
        self.selection.update_centre(self.layout, *self.viewport.centre, self.config.layout.centre_radius)

    def toggle_night_mode(self) -> None:
        self.night_mode = not self.night_mode

    def toggle_touch(self) -> None:
        self.touch_enabled = not self.touch_enabled

    def increase_strength(self) -> None:
        self.parameters.increase_strength()

    def decrease_strength(self) -> None:
        self.parameters.decrease_strength()

    def increase_distance(self) -> None:
        self.parameters.increase_distance()

    def decrease_distance(self) -> None:
        self.parameters.decrease_distance()

    # --- Frames ---

    def tick(self) -> None:
        """Layout tick callback: refresh the centre node and redraw."""
        self.pick_centre()
        self.redraw()

    def redraw(self) -> None:
        self.renderer.redraw(build_scene(
            self.controller.current_nodes,
            self.controller.edges,
            self.viewport,
            self.selection,
            debug=self.debug,
            night_mode=self.night_mode,
            touch_enabled=self.touch_enabled,
        ))

    def frame(self) -> None:
        """Events, then animation, then one layout step if it is running."""
        self.scheduler.frame()
        self.layout.step()

    def run(self, frames: int) -> None:
        for _ in range(frames):
            self.frame()

    @property
    def settled(self) -> bool:
        return not self.layout.running and self.scheduler.active_tasks == 0

    def node(self, item_id: int) -> Node:
        return self.controller.get_node(item_id)
