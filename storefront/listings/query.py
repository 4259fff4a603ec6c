"""Outbound listings query for the featured feed."""

import time
from dataclasses import dataclass, field
from typing import Callable

from storefront.listings.models import FeedRequestConfig
from storefront.listings.variants import create_image_variant_config

FEED_PAGE_SIZE = 4
STANDARD_VARIANT_WIDTH = 400
HIGH_DENSITY_VARIANT_WIDTH = 800

LISTING_FIELDS = (
    "title",
    "geolocation",
    "price",
    "deleted",
    "state",
    "publicData.listingType",
    "publicData.transactionProcessAlias",
    "publicData.unitType",
    "publicData.pickupEnabled",
    "publicData.shippingEnabled",
    "publicData.priceVariationsEnabled",
    "publicData.priceVariants",
)
USER_FIELDS = ("profile.displayName", "profile.abbreviatedName")
BASE_IMAGE_FIELDS = (
    "variants.scaled-small",
    "variants.scaled-medium",
    "variants.listing-card",
    "variants.listing-card-2x",
)


@dataclass(frozen=True)
class FeedQuery:
    cache_buster: int
    sort: str = "createdAt"
    filters: dict[str, str] = field(
        default_factory=lambda: {"states": "published", "deleted": "false"}
    )
    per_page: int = FEED_PAGE_SIZE
    include: tuple[str, ...] = ("author", "images")
    fields: dict[str, tuple[str, ...]] = field(default_factory=dict)
    image_variants: dict[str, str] = field(default_factory=dict)
    image_limit: int = 1

    def to_params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {
            "sort": self.sort,
            **self.filters,
            "perPage": self.per_page,
            "include": ",".join(self.include),
        }
        for entity_type, names in self.fields.items():
            params[f"fields.{entity_type}"] = ",".join(names)
        params.update(self.image_variants)
        params["limit.images"] = self.image_limit
        params["_cacheBuster"] = self.cache_buster
        return params


class CacheBuster:
    """Millisecond tokens, bumped so two queries in the same tick still differ."""

    def __init__(self, now: Callable[[], float] = time.time):
        self._now = now
        self._last = 0

    def next(self) -> int:
        self._last = max(int(self._now() * 1000), self._last + 1)
        return self._last


def build_feed_query(
    config: FeedRequestConfig, cache_buster: CacheBuster | None = None
) -> FeedQuery:
    """Describe the request for the newest published listings.

    The upstream sort is best effort; ordering is re-established by the
    reconciler. Only ``cache_buster`` varies between calls with the same
    config.
    """
    layout = config.image_layout
    aspect_ratio = layout.aspect_height / layout.aspect_width
    prefix = layout.variant_prefix
    high_density = f"{prefix}-2x"

    image_fields = BASE_IMAGE_FIELDS + (f"variants.{prefix}", f"variants.{high_density}")

    return FeedQuery(
        cache_buster=(cache_buster or CacheBuster()).next(),
        fields={
            "listing": LISTING_FIELDS,
            "user": USER_FIELDS,
            "image": image_fields,
        },
        image_variants={
            **create_image_variant_config(prefix, STANDARD_VARIANT_WIDTH, aspect_ratio),
            **create_image_variant_config(
                high_density, HIGH_DENSITY_VARIANT_WIDTH, aspect_ratio
            ),
        },
    )
