"""Reconcile a JSON:API listings response into display records."""

from datetime import datetime, timezone
from typing import Any

from storefront.listings.models import DisplayRecord, Entity, Envelope

IMAGE_TYPE = "image"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def normalize_id(value: Any) -> Any:
    """Reduce a structured ``{"uuid": ...}`` identifier to its scalar value."""
    if isinstance(value, dict):
        return value.get("uuid")
    return value


def _ids_match(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    if left == right:
        return True
    left_key, right_key = normalize_id(left), normalize_id(right)
    return left_key is not None and left_key == right_key


def _image_refs(entity: Entity) -> list:
    images = entity.relationships.get("images")
    if not isinstance(images, dict):
        return []
    data = images.get("data")
    if not isinstance(data, list):
        return []
    return [ref for ref in data if isinstance(ref, dict)]


def resolve_images(entity: Entity, images: list[Entity]) -> list[Entity]:
    """Look up each image reference of ``entity`` in ``images``.

    References without a match are dropped.
    """
    resolved = []
    for ref in _image_refs(entity):
        ref_id = ref.get("id")
        match = next((img for img in images if _ids_match(img.id, ref_id)), None)
        if match is not None:
            resolved.append(match)
    return resolved


def parse_created_at(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(record: DisplayRecord) -> tuple[bool, datetime]:
    created_at = parse_created_at(record.attributes.get("createdAt"))
    if created_at is None:
        return False, EPOCH
    return True, created_at


def reconcile(envelope: Envelope) -> list[DisplayRecord]:
    """Attach included images to each primary listing, newest first.

    Images are only drawn from ``envelope.included``. Listings with equal
    ``createdAt`` keep their upstream relative order, and listings without a
    readable ``createdAt`` sort last.
    """
    images = [e for e in envelope.included if e.type == IMAGE_TYPE]

    records = [
        DisplayRecord(
            id=entity.id,
            type=entity.type,
            attributes=entity.attributes,
            relationships=entity.relationships,
            images=resolve_images(entity, images),
        )
        for entity in envelope.primary
    ]

    # sorted() stays stable with reverse=True
    return sorted(records, key=_sort_key, reverse=True)
