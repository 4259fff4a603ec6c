"""Shared fixtures for storefront unit tests."""

import pytest

from payloads import make_image, make_listing


@pytest.fixture
def sample_payload() -> dict:
    """Two listings in upstream oldest-first order, one image included."""
    return {
        "data": [
            make_listing(1, "2024-01-02T00:00:00Z", image_ids=["i1"]),
            make_listing(2, "2024-01-05T00:00:00Z"),
        ],
        "included": [
            make_image("i1"),
            {"id": "u1", "type": "user", "attributes": {}},
        ],
    }
