"""FeaturedFeedService: runs the listing feed pipeline for mounted sections."""

import structlog

from storefront.listings.cache import FeedCache
from storefront.listings.entities import SanitizeConfig
from storefront.listings.models import (
    FeedRequestConfig,
    FeedView,
    FetchError,
    NetworkError,
    UnknownFeedError,
)
from storefront.listings.query import CacheBuster, build_feed_query
from storefront.listings.reconciler import reconcile
from storefront.listings.scheduler import DEFAULT_REFRESH_INTERVAL, RefreshScheduler
from storefront.listings.visibility import VisibilitySignal
from storefront.ports import EntityStore, ListingClient

logger = structlog.get_logger(__name__)


class FeaturedFeedService:
    def __init__(
        self,
        client: ListingClient,
        entity_store: EntityStore,
        cache: FeedCache | None = None,
        visibility: VisibilitySignal | None = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        listing_fields: tuple[str, ...] = (),
    ):
        self._client = client
        self._entity_store = entity_store
        self._cache = cache or FeedCache()
        self._visibility = visibility or VisibilitySignal()
        self._refresh_interval = refresh_interval
        self._listing_fields = listing_fields
        self._cache_buster = CacheBuster()
        self._schedulers: dict[str, RefreshScheduler] = {}

    @property
    def visibility(self) -> VisibilitySignal:
        return self._visibility

    def is_mounted(self, feed_id: str) -> bool:
        return feed_id in self._schedulers

    async def load(self, feed_id: str, config: FeedRequestConfig) -> None:
        """Fetch, reconcile and store one feed.

        Failures are recorded in the feed state and not raised.
        """
        feed_query = build_feed_query(config, self._cache_buster)
        seq = self._cache.begin_fetch(feed_id)

        try:
            envelope = await self._client.query(feed_query)
            sanitize_config = SanitizeConfig(
                listing_fields=config.listing_fields or self._listing_fields
            )
            self._entity_store.add_entities(envelope, sanitize_config)
            records = reconcile(envelope)
        except NetworkError as exc:
            logger.warning("feed_fetch_failed", feed_id=feed_id, error=str(exc))
            self._cache.fail_fetch(
                feed_id, seq, FetchError(kind="network", message=str(exc))
            )
            return
        except Exception as exc:
            logger.exception("feed_pipeline_failed", feed_id=feed_id)
            self._cache.fail_fetch(
                feed_id, seq, FetchError(kind="internal", message=repr(exc))
            )
            return

        if self._cache.complete_fetch(feed_id, seq, records):
            logger.info(
                "feed_loaded",
                feed_id=feed_id,
                count=len(records),
                with_images=sum(1 for r in records if r.images),
            )

    async def reload(self, feed_id: str, config: FeedRequestConfig) -> FeedView:
        """Run one fetch for a mounted feed outside its refresh schedule."""
        if feed_id not in self._schedulers:
            raise UnknownFeedError(f"Feed '{feed_id}' is not mounted")
        await self.load(feed_id, config)
        return self.snapshot(feed_id)

    def mount(self, feed_id: str, config: FeedRequestConfig) -> None:
        if feed_id in self._schedulers:
            self.unmount(feed_id)

        async def trigger() -> None:
            await self.load(feed_id, config)

        scheduler = RefreshScheduler(
            trigger,
            self._visibility,
            interval=self._refresh_interval,
            name=feed_id,
        )
        self._schedulers[feed_id] = scheduler
        scheduler.start()

    def unmount(self, feed_id: str) -> None:
        scheduler = self._schedulers.pop(feed_id, None)
        if scheduler is None:
            raise UnknownFeedError(f"Feed '{feed_id}' is not mounted")
        scheduler.stop()
        self._cache.release(feed_id)

    def snapshot(self, feed_id: str) -> FeedView:
        if feed_id not in self._schedulers and feed_id not in self._cache:
            raise UnknownFeedError(f"Feed '{feed_id}' is not mounted")
        return self._cache.view(feed_id)

    def set_hidden(self, hidden: bool) -> None:
        self._visibility.set_hidden(hidden)

    def shutdown(self) -> None:
        for feed_id in list(self._schedulers):
            self.unmount(feed_id)
