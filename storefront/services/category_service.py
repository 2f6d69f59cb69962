# storefront/services/category_service.py
from fastapi import HTTPException, status

from storefront.models.category import Category
from storefront.repositories.category_repo import CategoryRepository, slugify
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import CategoryRead, CategoryUpdate


class CategoryService:
    """
    Business logic for categories.

    Responsibilities:
      - merge stored categories with the labels products actually use
      - product counts, computed from the product store on every call
      - admin updates of name / description / image
    """

    def __init__(self, category_repo: CategoryRepository, product_repo: ProductRepository):
        self.category_repo = category_repo
        self.product_repo = product_repo

    def _product_counts(self) -> tuple[dict[str, int], dict[str, str]]:
        """
        Product counts keyed by lower-cased category label, plus the first
        spelling seen for each label.
        """
        counts: dict[str, int] = {}
        labels: dict[str, str] = {}
        for product in self.product_repo.get_all():
            if not product.category:
                continue
            key = product.category.lower()
            labels.setdefault(key, product.category)
            counts[key] = counts.get(key, 0) + 1
        return counts, labels

    @staticmethod
    def _to_read(category: Category, product_count: int) -> CategoryRead:
        return CategoryRead(**category.model_dump(), product_count=product_count)

    def list_categories(self) -> list[CategoryRead]:
        """
        All categories sorted by name, each with its product count.

        Stored categories are always listed (count may be 0). A label used
        by products but not stored is listed as a bare entry.
        """
        counts, labels = self._product_counts()

        result: list[CategoryRead] = []
        seen: set[str] = set()
        for category in self.category_repo.get_all():
            key = category.name.lower()
            seen.add(key)
            result.append(self._to_read(category, counts.get(key, 0)))

        for key, label in labels.items():
            if key not in seen:
                result.append(
                    CategoryRead(name=label, slug=slugify(label), product_count=counts[key])
                )

        return sorted(result, key=lambda c: c.name.lower())

    def update_category(self, category_id: str, payload: CategoryUpdate) -> CategoryRead:
        """
        Partial update. Fields not sent (or sent as null) keep their value.

        Raises:
            HTTPException(400): no updatable field in the payload.
            HTTPException(404): unknown category id.
        """
        changes = {
            k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None
        }
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid update fields provided",
            )

        category = self.category_repo.update(category_id, changes)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )

        counts, _ = self._product_counts()
        return self._to_read(category, counts.get(category.name.lower(), 0))
