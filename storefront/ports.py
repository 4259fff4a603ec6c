from typing import Any, Protocol

from storefront.listings.entities import SanitizeConfig
from storefront.listings.models import Entity, Envelope
from storefront.listings.query import FeedQuery
from storefront.sections.models import Section


class ListingClient(Protocol):
    async def query(self, feed_query: FeedQuery) -> Envelope: ...


class EntityStore(Protocol):
    def add_entities(
        self, envelope: Envelope, sanitize_config: SanitizeConfig
    ) -> None: ...

    def get_entity(self, entity_type: str, entity_id: Any) -> Entity | None: ...


class SectionStore(Protocol):
    def load_sections(self) -> list[Section]: ...

    def save_sections(self, sections: list[Section]) -> None: ...

    def add_section(self, section: Section) -> None: ...

    def ensure_data_file(self) -> None: ...
