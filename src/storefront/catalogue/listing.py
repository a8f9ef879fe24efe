"""Product queries: filtered browsing, category listing and search."""

import math

from protean.exceptions import ObjectNotFoundError
from protean.utils.query import Q

from storefront.catalogue.product import Product
from storefront.domain import storefront

SORT_OPTIONS = {
    "-created_at": ["-created_at"],
    "created_at": ["created_at"],
    "price": ["price", "-created_at"],
    "-price": ["-price", "-created_at"],
    "rating": ["rating", "-created_at"],
    "-rating": ["-rating", "-created_at"],
    "name": ["name"],
    "-name": ["-name"],
}
DEFAULT_SORT = "-created_at"


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


@storefront.repository(part_of=Product)
class ProductRepository:
    def fetch(self, product_id) -> Product:
        """Load a product, reporting a missing one by id."""
        try:
            return self.get(product_id)
        except ObjectNotFoundError as exc:
            raise ObjectNotFoundError(f"Product {product_id} not found") from exc

    def browse(
        self,
        category_id=None,
        gender=None,
        brand=None,
        min_price=None,
        max_price=None,
        size=None,
        color=None,
        search=None,
        sort=DEFAULT_SORT,
        page=1,
        limit=10,
    ) -> tuple[list[Product], int]:
        """Active products matching every given filter, one page at a time.

        ``size`` keeps products that have stock in that size; ``color`` and
        ``search`` are case-insensitive substring matches.
        """
        query = self._dao.query.filter(is_active=True)
        if category_id:
            query = query.filter(category_id=str(category_id))
        if gender:
            query = query.filter(gender=gender)
        if brand:
            query = query.filter(brand=brand)
        if min_price is not None:
            query = query.filter(price__gte=min_price)
        if max_price is not None:
            query = query.filter(price__lte=max_price)
        if search:
            query = query.filter(Q(name__icontains=search) | Q(description__icontains=search) | Q(brand__icontains=search))

        query = query.order_by(SORT_OPTIONS.get(sort, SORT_OPTIONS[DEFAULT_SORT]))
        offset = (page - 1) * limit

        if not size and not color:
            result = query.offset(offset).limit(limit).all()
            return result.items, result.total

        # Size stock and colour names live on child entities
        candidates = query.limit(None).all().items
        matches = [
            p for p in candidates if (not size or p.stock_for(size) > 0) and (not color or p.has_colour(color))
        ]
        return matches[offset : offset + limit], len(matches)

    def search(self, text: str, limit: int = 20) -> list[Product]:
        return (
            self._dao.query.filter(is_active=True)
            .filter(Q(name__icontains=text) | Q(description__icontains=text) | Q(brand__icontains=text))
            .order_by("-rating")
            .limit(limit)
            .all()
            .items
        )

    def active_by_ids(self, product_ids) -> list[Product]:
        """Active products among ``product_ids``, in the given order."""
        ids = [str(pid) for pid in product_ids]
        if not ids:
            return []
        found = {str(p.id): p for p in self._dao.query.filter(id__in=ids, is_active=True).limit(None).all().items}
        return [found[pid] for pid in ids if pid in found]
