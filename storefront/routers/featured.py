import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from storefront.app_state import AppState
from storefront.listings.models import UnknownFeedError
from storefront.models import FeedConfigRequest, FeedViewResponse, VisibilityRequest

router = APIRouter(prefix="/api/v1")

logger = structlog.get_logger(__name__)


def get_app_state(request: Request) -> AppState:
    return request.app.state.app_state


@router.get("/featured/{feed_id}")
async def get_featured(
    feed_id: str, state: AppState = Depends(get_app_state)
) -> FeedViewResponse:
    try:
        view = state.feed_service.snapshot(feed_id)
    except UnknownFeedError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return FeedViewResponse.from_view(view)


@router.put("/featured/{feed_id}", status_code=201)
async def mount_featured(
    feed_id: str,
    body: FeedConfigRequest,
    state: AppState = Depends(get_app_state),
) -> FeedViewResponse:
    state.feed_service.mount(feed_id, body.to_config())
    logger.info("feed_mounted", feed_id=feed_id)
    return FeedViewResponse.from_view(state.feed_service.snapshot(feed_id))


@router.delete("/featured/{feed_id}", status_code=204)
async def unmount_featured(feed_id: str, state: AppState = Depends(get_app_state)):
    try:
        state.feed_service.unmount(feed_id)
    except UnknownFeedError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.info("feed_unmounted", feed_id=feed_id)
    return Response(status_code=204)


@router.post("/featured/{feed_id}/reload")
async def reload_featured(
    feed_id: str,
    body: FeedConfigRequest,
    state: AppState = Depends(get_app_state),
) -> FeedViewResponse:
    try:
        view = await state.feed_service.reload(feed_id, body.to_config())
    except UnknownFeedError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return FeedViewResponse.from_view(view)


@router.post("/visibility", status_code=204)
async def set_visibility(
    body: VisibilityRequest, state: AppState = Depends(get_app_state)
):
    state.feed_service.set_hidden(body.hidden)
    return Response(status_code=204)
