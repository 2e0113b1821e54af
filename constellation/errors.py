"""Exception types raised by the constellation core."""


class ConstellationError(Exception):
    """Base class for all constellation errors."""


class CatalogueLoadError(ConstellationError):
    """The catalogue could not be fetched or parsed. Fatal for the session."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not load catalogue from {source}: {reason}")
        self.source = source
        self.reason = reason


class UnknownItemError(ConstellationError, KeyError):
    """An item id was looked up that the catalogue does not contain."""

    def __init__(self, item_id: int) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item not found: {self.item_id}"
