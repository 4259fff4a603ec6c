"""Image variant parameters for the marketplace image resizing service."""

import structlog

logger = structlog.get_logger(__name__)

MAX_VARIANT_DIMENSION = 3072


def create_image_variant_config(
    name: str, width: int, aspect_ratio: float
) -> dict[str, str]:
    """Build the query parameter requesting a custom image variant.

    Args:
        name: Variant name, e.g. "listing-card" or "listing-card-2x".
        width: Target width in pixels.
        aspect_ratio: Height divided by width.

    Returns:
        A single-entry dict mapping "imageVariant.<name>" to the
        "w:<width>;h:<height>;fit:crop" value the API expects.
    """
    variant_width = width
    variant_height = round(aspect_ratio * width)

    if variant_width > MAX_VARIANT_DIMENSION or variant_height > MAX_VARIANT_DIMENSION:
        logger.warning(
            "image_variant_too_large",
            name=name,
            width=variant_width,
            height=variant_height,
        )
        if variant_height > MAX_VARIANT_DIMENSION:
            variant_height = MAX_VARIANT_DIMENSION
            variant_width = round(variant_height / aspect_ratio)
        else:
            variant_width = MAX_VARIANT_DIMENSION
            variant_height = round(variant_width * aspect_ratio)

    return {f"imageVariant.{name}": f"w:{variant_width};h:{variant_height};fit:crop"}
