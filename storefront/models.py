from typing import Any

from pydantic import BaseModel, Field

from storefront.listings.models import (
    DEFAULT_VARIANT_PREFIX,
    DisplayRecord,
    Entity,
    FeedRequestConfig,
    FeedView,
    ImageLayout,
)


class ImageLayoutModel(BaseModel):
    aspect_width: float = Field(default=1, gt=0)
    aspect_height: float = Field(default=1, gt=0)
    variant_prefix: str = Field(default=DEFAULT_VARIANT_PREFIX, min_length=1)

    def to_layout(self) -> ImageLayout:
        return ImageLayout(
            aspect_width=self.aspect_width,
            aspect_height=self.aspect_height,
            variant_prefix=self.variant_prefix,
        )


class FeedConfigRequest(BaseModel):
    image_layout: ImageLayoutModel = Field(default_factory=ImageLayoutModel)
    listing_fields: list[str] = []

    def to_config(self) -> FeedRequestConfig:
        return FeedRequestConfig(
            image_layout=self.image_layout.to_layout(),
            listing_fields=tuple(self.listing_fields),
        )


class VisibilityRequest(BaseModel):
    hidden: bool


class AddSectionRequest(BaseModel):
    id: str = Field(min_length=1, max_length=128)
    title: str = "Featured Fits"
    image_layout: ImageLayoutModel = Field(default_factory=ImageLayoutModel)


class EntityModel(BaseModel):
    id: Any
    type: str
    attributes: dict
    relationships: dict


class RecordModel(EntityModel):
    images: list[EntityModel]


class ErrorModel(BaseModel):
    kind: str
    message: str


class FeedViewResponse(BaseModel):
    records: list[RecordModel]
    is_loading: bool
    error: ErrorModel | None
    visible: bool

    @classmethod
    def from_view(cls, view: FeedView) -> "FeedViewResponse":
        return cls(
            records=[_record(r) for r in view.records],
            is_loading=view.is_loading,
            error=ErrorModel(kind=view.error.kind, message=view.error.message)
            if view.error
            else None,
            visible=view.visible,
        )


def _entity(entity: Entity) -> EntityModel:
    return EntityModel(
        id=entity.id,
        type=entity.type,
        attributes=entity.attributes,
        relationships=entity.relationships,
    )


def _record(record: DisplayRecord) -> RecordModel:
    return RecordModel(
        id=record.id,
        type=record.type,
        attributes=record.attributes,
        relationships=record.relationships,
        images=[_entity(i) for i in record.images],
    )
