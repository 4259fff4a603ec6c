import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.app_state import AppState
from storefront.listings.models import FeedRequestConfig
from storefront.models import AddSectionRequest
from storefront.sections.models import DuplicateSectionError, Section

router = APIRouter(prefix="/api/v1")

logger = structlog.get_logger(__name__)


def get_app_state(request: Request) -> AppState:
    return request.app.state.app_state


def _section_dict(section: Section) -> dict:
    layout = section.image_layout
    return {
        "id": section.id,
        "title": section.title,
        "image_layout": {
            "aspect_width": layout.aspect_width,
            "aspect_height": layout.aspect_height,
            "variant_prefix": layout.variant_prefix,
        },
    }


@router.get("/sections")
async def get_sections(state: AppState = Depends(get_app_state)):
    return [_section_dict(s) for s in state.section_store.load_sections()]


@router.put("/sections", status_code=201)
async def put_section(body: AddSectionRequest, state: AppState = Depends(get_app_state)):
    section = Section(
        id=body.id, title=body.title, image_layout=body.image_layout.to_layout()
    )
    try:
        state.section_store.add_section(section)
    except DuplicateSectionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    state.feed_service.mount(
        section.id, FeedRequestConfig(image_layout=section.image_layout)
    )
    logger.info("section_added", id=section.id)
    return _section_dict(section)
