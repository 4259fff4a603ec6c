import logging
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.app_state import AppState
from storefront.config import Settings
from storefront.listings.client import HttpListingClient
from storefront.listings.entities import InMemoryEntityStore
from storefront.listings.models import FeedRequestConfig
from storefront.listings.service import FeaturedFeedService
from storefront.routers import featured, sections
from storefront.sections.store import YamlSectionStore

settings = Settings()

logging.basicConfig(level=settings.log_level.upper())
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = HttpListingClient(
        settings.marketplace_base_url,
        settings.marketplace_client_id,
        timeout=settings.marketplace_timeout,
    )
    feed_service = FeaturedFeedService(
        client,
        InMemoryEntityStore(),
        refresh_interval=settings.feed_refresh_interval,
        listing_fields=tuple(settings.listing_fields),
    )

    section_store = YamlSectionStore(settings.sections_path)
    section_store.ensure_data_file()
    mounted = section_store.load_sections()
    for section in mounted:
        feed_service.mount(section.id, FeedRequestConfig(image_layout=section.image_layout))
    logger.info("sections_mounted", count=len(mounted))

    app.state.app_state = AppState(feed_service=feed_service, section_store=section_store)
    app.state.settings = settings
    yield
    feed_service.shutdown()


app = FastAPI(title="Storefront API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(featured.router)
app.include_router(sections.router)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
