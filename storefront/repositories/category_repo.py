import re
from pathlib import Path
from typing import Any

from storefront.models.category import Category
from storefront.repositories.record_store import RecordStore

DEFAULT_CATEGORY_IMAGE = "/api/placeholder/300/200"

# Written when categories.json does not exist yet; matches the demo catalog.
DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {
        "name": "Accessories",
        "description": "Phone stands, holders, and other accessories",
    },
    {
        "name": "Gaming",
        "description": "Gaming accessories and organizers",
    },
    {
        "name": "Office",
        "description": "Office organization and productivity tools",
    },
]


def slugify(raw: str) -> str:
    """
    Basic slugification:
      - lowercase
      - non-alphanumeric -> '-'
      - collapse multiple '-'
      - strip leading/trailing '-'
    """
    value = raw.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = re.sub(r"-+", "-", value)
    value = value.strip("-")
    return value or "category"


class CategoryRepository(RecordStore[Category]):
    """
    Data access layer for categories.json.

    NOTE:
      - slug is derived from the name on create and kept stable after
        that, so links to a category survive a rename.
    """

    model = Category
    entity = "category"

    def __init__(
        self,
        path: str | Path,
        *,
        default_image: str = DEFAULT_CATEGORY_IMAGE,
        seed_defaults: bool = False,
        **kwargs: Any,
    ):
        self.default_image = default_image
        seed = DEFAULT_CATEGORIES if seed_defaults else None
        super().__init__(path, seed=seed, **kwargs)

    def prepare_create(self, fields: dict[str, Any], record_id: str) -> dict[str, Any]:
        data = dict(fields)
        if not data.get("slug"):
            data["slug"] = slugify(str(data.get("name", "")))
        if not data.get("image"):
            data["image"] = self.default_image
        return data

    def prepare_update(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in fields.items() if k != "slug"}

