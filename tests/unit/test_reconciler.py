"""Tests for the listings response reconciler."""

from storefront.listings.models import Envelope
from storefront.listings.reconciler import parse_created_at, reconcile

from payloads import make_image, make_listing


class TestImageAttachment:
    def test_referenced_image_attached_once(self, sample_payload):
        """A reference to an included image resolves to exactly that image."""
        records = reconcile(Envelope.from_json(sample_payload))
        by_id = {r.id: r for r in records}
        assert [img.id for img in by_id[1].images] == ["i1"]
        assert by_id[2].images == []

    def test_image_order_follows_relationship_order(self):
        """Images are attached in the order of the relationship references."""
        payload = {
            "data": [make_listing(1, "2024-01-01", image_ids=["b", "a", "c"])],
            "included": [make_image("a"), make_image("b"), make_image("c")],
        }
        records = reconcile(Envelope.from_json(payload))
        assert [img.id for img in records[0].images] == ["b", "a", "c"]

    def test_dangling_reference_dropped(self):
        """References missing from included are dropped without raising."""
        payload = {
            "data": [make_listing(1, "2024-01-01", image_ids=["i1", "missing"])],
            "included": [make_image("i1")],
        }
        records = reconcile(Envelope.from_json(payload))
        assert [img.id for img in records[0].images] == ["i1"]

    def test_structured_ids_match(self):
        """Identifiers given as {"uuid": ...} mappings are matched by uuid."""
        listing = make_listing({"uuid": "l1"}, "2024-01-01")
        listing["relationships"]["images"]["data"] = [{"id": {"uuid": "img-1"}}]
        payload = {"data": [listing], "included": [make_image({"uuid": "img-1"})]}
        records = reconcile(Envelope.from_json(payload))
        assert records[0].images[0].id == {"uuid": "img-1"}

    def test_structured_ref_matches_scalar_image_id(self):
        """A structured reference matches a scalar image id carrying the same uuid."""
        listing = make_listing("l1", "2024-01-01")
        listing["relationships"]["images"]["data"] = [{"id": {"uuid": "img-1"}}]
        payload = {"data": [listing], "included": [make_image("img-1")]}
        records = reconcile(Envelope.from_json(payload))
        assert len(records[0].images) == 1

    def test_scalar_ids_do_not_cross_match(self):
        """Different scalar ids never match each other."""
        payload = {
            "data": [make_listing(1, "2024-01-01", image_ids=["i2"])],
            "included": [make_image("i1")],
        }
        assert reconcile(Envelope.from_json(payload))[0].images == []

    def test_only_image_typed_entities_are_attached(self):
        """An included entity with a matching id but another type is ignored."""
        payload = {
            "data": [make_listing(1, "2024-01-01", image_ids=["x"])],
            "included": [{"id": "x", "type": "user"}],
        }
        assert reconcile(Envelope.from_json(payload))[0].images == []

    def test_missing_images_relationship_is_empty(self):
        """A listing without an images relationship gets an empty list."""
        payload = {"data": [{"id": 1, "type": "listing", "attributes": {}}]}
        records = reconcile(Envelope.from_json(payload))
        assert records[0].images == []

    def test_malformed_relationship_degrades(self):
        """Malformed relationship data never raises."""
        payload = {
            "data": [
                {"id": 1, "type": "listing", "relationships": {"images": "oops"}},
                {"id": 2, "type": "listing", "relationships": {"images": {"data": None}}},
                {"id": 3, "type": "listing", "relationships": {"images": {"data": ["x"]}}},
            ],
            "included": "not-a-list",
        }
        records = reconcile(Envelope.from_json(payload))
        assert len(records) == 3
        assert all(r.images == [] for r in records)

    def test_images_only_from_same_response(self, sample_payload):
        """Reconciling a second envelope never reuses images from the first."""
        reconcile(Envelope.from_json(sample_payload))
        second = {"data": [make_listing(9, "2024-02-01", image_ids=["i1"])]}
        records = reconcile(Envelope.from_json(second))
        assert records[0].images == []


class TestOrdering:
    def test_newest_first(self, sample_payload):
        """Records are sorted by createdAt descending."""
        records = reconcile(Envelope.from_json(sample_payload))
        assert [r.id for r in records] == [2, 1]

    def test_date_only_example(self):
        """Date-only timestamps sort like full timestamps."""
        payload = {
            "data": [
                make_listing(1, "2024-01-02", image_ids=["i1"]),
                make_listing(2, "2024-01-05"),
            ],
            "included": [make_image("i1")],
        }
        records = reconcile(Envelope.from_json(payload))
        assert [r.id for r in records] == [2, 1]
        assert records[0].images == []
        assert [img.id for img in records[1].images] == ["i1"]

    def test_ties_keep_upstream_order(self):
        """Records with equal createdAt keep their relative upstream order."""
        payload = {
            "data": [
                make_listing("a", "2024-01-01T00:00:00Z"),
                make_listing("b", "2024-03-01T00:00:00Z"),
                make_listing("c", "2024-01-01T00:00:00Z"),
                make_listing("d", "2024-01-01T00:00:00Z"),
            ]
        }
        records = reconcile(Envelope.from_json(payload))
        assert [r.id for r in records] == ["b", "a", "c", "d"]

    def test_pairwise_descending(self):
        """Every adjacent pair is ordered newest first."""
        stamps = ["2023-05-01", "2024-01-01T10:00:00+02:00", "2022-12-31", "2024-01-01"]
        payload = {"data": [make_listing(i, s) for i, s in enumerate(stamps)]}
        records = reconcile(Envelope.from_json(payload))
        parsed = [parse_created_at(r.attributes["createdAt"]) for r in records]
        assert all(a >= b for a, b in zip(parsed, parsed[1:]))

    def test_missing_created_at_sorts_last(self):
        """Records without a readable createdAt come after dated ones."""
        payload = {
            "data": [
                make_listing("none", None),
                make_listing("bad", "not-a-date"),
                make_listing("old", "2001-01-01"),
            ]
        }
        records = reconcile(Envelope.from_json(payload))
        assert [r.id for r in records] == ["old", "none", "bad"]

    def test_empty_primary(self):
        """An empty envelope reconciles to an empty list."""
        assert reconcile(Envelope.from_json({"data": [], "included": []})) == []
        assert reconcile(Envelope.from_json(None)) == []
