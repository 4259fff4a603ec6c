"""Tests for AppState NamedTuple."""

from storefront.app_state import AppState


class TestAppState:
    def test_app_state_is_named_tuple(self):
        """AppState should be a NamedTuple subclass."""
        assert issubclass(AppState, tuple)

    def test_app_state_has_feed_service_field(self):
        assert "feed_service" in AppState._fields

    def test_app_state_has_section_store_field(self):
        assert "section_store" in AppState._fields
