"""Catalogue loading: one fetch per session, from a URL or a local file."""

import json
import logging
from collections import Counter
from pathlib import Path

import httpx
from pydantic import ValidationError

from constellation.errors import CatalogueLoadError
from constellation.models import CatalogueFile, Item

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def parse_catalogue(raw: str | bytes, source: str = "<memory>") -> list[Item]:
    """Parse catalogue JSON of the form ``{"record": [...]}``."""
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogueLoadError(source, f"malformed JSON ({e})") from e
    try:
        return CatalogueFile.model_validate(payload).record
    except ValidationError as e:
        raise CatalogueLoadError(source, f"invalid catalogue ({e.error_count()} errors)") from e


def load_catalogue(
    source: str,
    *,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> list[Item]:
    """Fetch and parse the catalogue. Any failure is final; nothing is retried.

    Args:
        source: ``http(s)://`` URL or filesystem path.
        timeout: Request timeout in seconds when creating an internal client.
        client: Optional pre-configured ``httpx.Client`` (useful for testing).

    Raises:
        CatalogueLoadError: transport error, non-2xx response, unreadable file,
            malformed JSON, or records that fail validation.
    """
    if _is_url(source) or client is not None:
        raw = _fetch(source, timeout, client)
    else:
        path = Path(source).expanduser()
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise CatalogueLoadError(source, str(e)) from e

    items = parse_catalogue(raw, source)
    logger.info("Data loaded %d nodes found.", len(items))
    return items


def _fetch(url: str, timeout: float, client: httpx.Client | None) -> bytes:
    should_close = client is None
    session = client or httpx.Client(timeout=timeout)
    try:
        response = session.get(url)
        if not response.is_success:
            raise CatalogueLoadError(url, f"HTTP error {response.status_code}")
        return response.content
    except httpx.HTTPError as e:
        raise CatalogueLoadError(url, str(e)) from e
    finally:
        if should_close:
            session.close()


class CatalogueSummary:
    """Shape of a loaded catalogue, for the ``stats`` command."""

    def __init__(self, items: list[Item]) -> None:
        ids = {item.id for item in items}
        self.items = len(items)
        self.categories: Counter[str] = Counter(item.category.name for item in items)
        self.relations = sum(len(item.related) for item in items)
        self.dangling = sum(1 for item in items for rid in item.related if rid not in ids)
        self.isolated = sum(1 for item in items if not item.related)
        self.duplicate_ids = len(items) - len(ids)

    @property
    def mean_related(self) -> float:
        return self.relations / self.items if self.items else 0.0

    def __repr__(self) -> str:
        return (
            f"CatalogueSummary({self.items} items, {len(self.categories)} categories, "
            f"{self.relations} relations (mean {self.mean_related:.1f}), "
            f"{self.dangling} dangling, {self.isolated} isolated)"
        )
