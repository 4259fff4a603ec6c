"""Landing page sections that host a featured listings feed."""

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from storefront.models import ImageLayoutModel
from storefront.sections.models import DuplicateSectionError, Section

logger = structlog.get_logger(__name__)

DEFAULT_TITLE = "Featured Fits"


def _section_from_dict(data: dict) -> Section:
    """Build a Section, applying the same layout rules as the HTTP API.

    Raises:
        KeyError: When the section has no id.
        ValidationError: When the image layout is invalid, e.g. a zero side.
    """
    if data.get("id") is None:
        raise KeyError("id")
    layout = ImageLayoutModel.model_validate(data.get("image_layout") or {})
    return Section(
        id=str(data["id"]),
        title=data.get("title") or DEFAULT_TITLE,
        image_layout=layout.to_layout(),
    )


def _section_to_dict(section: Section) -> dict:
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


class YamlSectionStore:
    """Featured-feed sections of the landing page, kept in a YAML file.

    Entries that would produce an unusable feed (no id, non-positive aspect
    sides, non-mapping entries) are skipped with a warning so one bad entry
    never stops the rest of the page from mounting.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def _read_entries(self) -> list:
        if not self._path.exists():
            return []
        content = self._path.read_text()
        if not content.strip():
            return []
        data = yaml.safe_load(content)
        if not isinstance(data, dict) or not isinstance(data.get("sections"), list):
            return []
        return data["sections"]

    def load_sections(self) -> list[Section]:
        sections = []
        for index, entry in enumerate(self._read_entries()):
            if not isinstance(entry, dict):
                logger.warning("section_skipped", index=index, reason="not a mapping")
                continue
            try:
                sections.append(_section_from_dict(entry))
            except KeyError:
                logger.warning("section_skipped", index=index, reason="missing id")
            except ValidationError as exc:
                logger.warning(
                    "section_skipped",
                    index=index,
                    id=entry.get("id"),
                    reason=str(exc),
                )
        return sections

    def save_sections(self, sections: list[Section]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {"sections": [_section_to_dict(s) for s in sections]}
        self._path.write_text(yaml.dump(data, default_flow_style=False))

    def add_section(self, section: Section) -> None:
        # Skipped entries are dropped on rewrite; ids of valid sections stay unique
        sections = self.load_sections()
        if any(existing.id == section.id for existing in sections):
            raise DuplicateSectionError(f"Section '{section.id}' already exists")
        sections.append(section)
        self.save_sections(sections)

    def ensure_data_file(self) -> None:
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(yaml.dump({"sections": []}, default_flow_style=False))
