"""Keyed in-memory cache of feed states."""

import itertools
from dataclasses import replace

import structlog

from storefront.listings.models import DisplayRecord, FeedState, FeedView, FetchError

logger = structlog.get_logger(__name__)


class FeedCache:
    """Holds one FeedState per feed instance.

    Every fetch takes a ticket from ``begin_fetch``. Sequence numbers come
    from a single counter shared by all feeds, so tickets issued before a
    ``release`` always fall below the floor of any entry created later.
    """

    def __init__(self):
        self._states: dict[str, FeedState] = {}
        self._sequence = itertools.count(1)
        self._last_issued = 0

    def _entry(self, feed_id: str) -> FeedState:
        state = self._states.get(feed_id)
        if state is None:
            state = FeedState(floor=self._last_issued + 1)
            self._states[feed_id] = state
        return state

    def __contains__(self, feed_id: str) -> bool:
        return feed_id in self._states

    def begin_fetch(self, feed_id: str) -> int:
        state = self._entry(feed_id)
        seq = next(self._sequence)
        self._last_issued = seq
        state.latest_started = seq
        state.is_loading = True
        return seq

    def _accepts(self, feed_id: str, seq: int) -> FeedState | None:
        state = self._states.get(feed_id)
        if state is None or seq < state.floor or seq < state.latest_applied:
            logger.debug("feed_response_stale", feed_id=feed_id, seq=seq)
            return None
        return state

    def _settle(self, state: FeedState, seq: int) -> None:
        state.latest_applied = seq
        state.is_loading = seq < state.latest_started

    def complete_fetch(
        self, feed_id: str, seq: int, records: list[DisplayRecord]
    ) -> bool:
        state = self._accepts(feed_id, seq)
        if state is None:
            return False
        state.records = list(records)
        state.error = None
        self._settle(state, seq)
        return True

    def fail_fetch(self, feed_id: str, seq: int, error: FetchError) -> bool:
        state = self._accepts(feed_id, seq)
        if state is None:
            return False
        state.error = error
        self._settle(state, seq)
        return True

    def get(self, feed_id: str) -> FeedState:
        state = self._states.get(feed_id)
        if state is None:
            return FeedState()
        return replace(state, records=list(state.records))

    def view(self, feed_id: str) -> FeedView:
        state = self.get(feed_id)
        return FeedView(
            records=state.records, is_loading=state.is_loading, error=state.error
        )

    def release(self, feed_id: str) -> None:
        self._states.pop(feed_id, None)
