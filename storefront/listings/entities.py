"""In-memory marketplace entity store."""

from dataclasses import dataclass, replace
from typing import Any

import structlog

from storefront.listings.models import Entity, Envelope
from storefront.listings.reconciler import normalize_id

logger = structlog.get_logger(__name__)

BUILT_IN_PUBLIC_DATA = (
    "listingType",
    "transactionProcessAlias",
    "unitType",
    "pickupEnabled",
    "shippingEnabled",
    "priceVariationsEnabled",
    "priceVariants",
)


@dataclass(frozen=True)
class SanitizeConfig:
    listing_fields: tuple[str, ...] = ()


def sanitize_entity(entity: Entity, config: SanitizeConfig) -> Entity:
    if entity.type != "listing" or not config.listing_fields:
        return entity
    public_data = entity.attributes.get("publicData")
    if not isinstance(public_data, dict):
        return entity
    allowed = set(BUILT_IN_PUBLIC_DATA) | set(config.listing_fields)
    kept = {k: v for k, v in public_data.items() if k in allowed}
    return replace(entity, attributes={**entity.attributes, "publicData": kept})


def _store_key(entity_type: str, entity_id: Any) -> tuple[str, Any] | None:
    key = (entity_type, normalize_id(entity_id))
    try:
        hash(key)
    except TypeError:
        return None
    return key


class InMemoryEntityStore:
    def __init__(self):
        self._entities: dict[tuple[str, Any], Entity] = {}

    def add_entities(self, envelope: Envelope, sanitize_config: SanitizeConfig) -> None:
        for entity in envelope.primary + envelope.included:
            key = _store_key(entity.type, entity.id)
            if key is None:
                logger.debug("entity_id_unusable", type=entity.type, id=repr(entity.id))
                continue
            self._entities[key] = sanitize_entity(entity, sanitize_config)

    def get_entity(self, entity_type: str, entity_id: Any) -> Entity | None:
        key = _store_key(entity_type, entity_id)
        if key is None:
            return None
        return self._entities.get(key)

    def get_listings(self, ids: list[Any]) -> list[Entity]:
        listings = (self.get_entity("listing", i) for i in ids)
        return [listing for listing in listings if listing is not None]

    def __len__(self) -> int:
        return len(self._entities)
