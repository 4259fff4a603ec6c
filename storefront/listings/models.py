from dataclasses import dataclass, field
from typing import Any

DEFAULT_VARIANT_PREFIX = "listing-card"


@dataclass(frozen=True)
class ImageLayout:
    aspect_width: float = 1
    aspect_height: float = 1
    variant_prefix: str = DEFAULT_VARIANT_PREFIX


@dataclass(frozen=True)
class FeedRequestConfig:
    image_layout: ImageLayout = field(default_factory=ImageLayout)
    listing_fields: tuple[str, ...] = ()


@dataclass
class Entity:
    id: Any
    type: str
    attributes: dict = field(default_factory=dict)
    relationships: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict) -> "Entity":
        attributes = data.get("attributes")
        relationships = data.get("relationships")
        return cls(
            id=data.get("id"),
            type=str(data.get("type") or ""),
            attributes=attributes if isinstance(attributes, dict) else {},
            relationships=relationships if isinstance(relationships, dict) else {},
        )


@dataclass
class Envelope:
    primary: list[Entity] = field(default_factory=list)
    included: list[Entity] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Any) -> "Envelope":
        if not isinstance(payload, dict):
            return cls()
        return cls(
            primary=_entities(payload.get("data")),
            included=_entities(payload.get("included")),
        )


def _entities(items: Any) -> list[Entity]:
    if not isinstance(items, list):
        return []
    return [Entity.from_json(item) for item in items if isinstance(item, dict)]


@dataclass
class DisplayRecord:
    id: Any
    type: str
    attributes: dict
    relationships: dict
    images: list[Entity] = field(default_factory=list)


@dataclass(frozen=True)
class FetchError:
    kind: str
    message: str


@dataclass
class FeedState:
    records: list[DisplayRecord] = field(default_factory=list)
    is_loading: bool = False
    error: FetchError | None = None
    # Sequence bookkeeping for stale-response suppression
    floor: int = 0
    latest_started: int = 0
    latest_applied: int = 0


@dataclass
class FeedView:
    records: list[DisplayRecord]
    is_loading: bool
    error: FetchError | None

    @property
    def visible(self) -> bool:
        # Retained records stay on screen through a failed refresh
        return bool(self.records)


class NetworkError(Exception):
    pass


class UnknownFeedError(Exception):
    pass
