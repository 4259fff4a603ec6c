from typing import NamedTuple

from storefront.listings.service import FeaturedFeedService
from storefront.ports import SectionStore


class AppState(NamedTuple):
    feed_service: FeaturedFeedService
    section_store: SectionStore
