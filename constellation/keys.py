"""Single-key shortcuts (no modifiers) and the session operation each triggers."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyTarget(Protocol):
    def toggle_debug(self) -> None: ...
    def pick_centre(self) -> None: ...
    def toggle_night_mode(self) -> None: ...
    def toggle_touch(self) -> None: ...
    def increase_strength(self) -> None: ...
    def decrease_strength(self) -> None: ...
    def increase_distance(self) -> None: ...
    def decrease_distance(self) -> None: ...


KEY_BINDINGS: dict[str, str] = {
    "d": "toggle_debug",
    "c": "pick_centre",
    "n": "toggle_night_mode",
    "t": "toggle_touch",
    "+": "increase_strength",
    "=": "increase_strength",  # unshifted "+"
    "-": "decrease_strength",
    "ArrowUp": "increase_distance",
    "ArrowDown": "decrease_distance",
}


def dispatch_key(target: KeyTarget, key: str) -> str | None:
    """Run the operation bound to ``key``. Returns its name, or None if unbound."""
    action = KEY_BINDINGS.get(key)
    if action is None:
        logger.debug("Unbound key %r", key)
        return None
    getattr(target, action)()
    return action
