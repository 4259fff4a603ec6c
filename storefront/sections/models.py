from dataclasses import dataclass, field

from storefront.listings.models import ImageLayout


@dataclass
class Section:
    id: str
    title: str = "Featured Fits"
    image_layout: ImageLayout = field(default_factory=ImageLayout)


class DuplicateSectionError(Exception):
    pass
