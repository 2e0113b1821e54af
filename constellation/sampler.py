"""Random selection primitives over item collections."""

import logging
import random
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from constellation.errors import UnknownItemError
from constellation.models import Item

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(value: Any) -> Any:
    """Items and nodes compare by id; plain values (ids, edges) by themselves."""
    return getattr(value, "id", value)


class Sampler:
    """Uniform random culling with an injectable, seedable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    @classmethod
    def seeded(cls, seed: int | None) -> "Sampler":
        return cls(random.Random(seed))

    def cull(self, items: Iterable[T], max_items: int, preserve: T | None = None) -> list[T]:
        """Return at most ``max_items`` items drawn without replacement.

        If ``preserve`` is given it is taken out of the pool before sampling
        and always appended, so the result may hold ``max_items + 1`` entries.
        A preserve target that is not in ``items`` is appended as supplied.
        """
        logger.debug("Culling to %d.", max_items)
        pool = list(items)
        preserved = None

        if preserve is not None:
            key = _identity(preserve)
            preserved = next((item for item in pool if _identity(item) == key), preserve)
            pool = [item for item in pool if _identity(item) != key]

        if max_items < 1:
            return [preserved] if preserved is not None else []

        if len(pool) > max_items:
            result = self.rng.sample(pool, max_items)
        else:
            result = pool[:]
            self.rng.shuffle(result)

        if preserved is not None:
            result.append(preserved)
        return result


def find_item(item_id: int, catalogue: Sequence[Item]) -> Item:
    for item in catalogue:
        if item.id == item_id:
            return item
    raise UnknownItemError(item_id)


def related_of(item_id: int, catalogue: Sequence[Item]) -> list[Item]:
    """Catalogue items listed in the ``related`` field of ``item_id``.

    The relation is read as declared on the queried item; it is not checked
    for symmetry. Result keeps catalogue order.
    """
    logger.debug("Get nodes related to %d.", item_id)
    wanted = set(find_item(item_id, catalogue).related)
    return [item for item in catalogue if item.id in wanted]


def dedupe_by_id(items: Iterable[T]) -> list[T]:
    """Drop later entries that repeat an earlier id."""
    seen: set[Any] = set()
    result: list[T] = []
    for item in items:
        key = _identity(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result
