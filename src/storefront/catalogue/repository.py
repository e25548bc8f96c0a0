"""Repository for the Product aggregate."""

from storefront.catalogue.product import Product
from storefront.domain import storefront

PAGE_SIZE = 100


@storefront.repository(part_of=Product)
class ProductRepository:
    def _fetch(self, query) -> list[Product]:
        """Every product matching ``query``, page by page, newest first."""
        products = []
        while True:
            page = query.offset(len(products)).limit(PAGE_SIZE).all()
            products.extend(page.items)
            if not page.items or len(products) >= page.total:
                break
        return sorted(products, key=lambda p: p.created_at, reverse=True)

    def matching(self, search=None, min_price=None, max_price=None, **filters) -> list[Product]:
        """Products matching the field filters and price bounds, newest first.

        ``search`` is a case-insensitive substring match on name or description.
        """
        criteria = {field: value for field, value in filters.items() if value is not None}
        if min_price is not None:
            criteria["price__gte"] = min_price
        if max_price is not None:
            criteria["price__lte"] = max_price

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        products = self._fetch(query)

        if search:
            needle = search.casefold()
            products = [
                p for p in products if needle in p.name.casefold() or needle in (p.description or "").casefold()
            ]
        return products

    def count(self, **filters) -> int:
        query = self._dao.query.filter(**filters) if filters else self._dao.query
        return query.all().total
