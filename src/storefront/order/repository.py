"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.order.order import Order

PAGE_SIZE = 100


@storefront.repository(part_of=Order)
class OrderRepository:
    def _fetch(self, query) -> list[Order]:
        """Every order matching ``query``, page by page, newest first."""
        orders = []
        while True:
            page = query.offset(len(orders)).limit(PAGE_SIZE).all()
            orders.extend(page.items)
            if not page.items or len(orders) >= page.total:
                break
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def for_user(self, user_id) -> list[Order]:
        return self._fetch(self._dao.query.filter(user_id=str(user_id)))

    def matching(self, **filters) -> list[Order]:
        """Orders matching the given field filters, newest first."""
        query = self._dao.query
        criteria = {field: value for field, value in filters.items() if value is not None}
        if criteria:
            query = query.filter(**criteria)
        return self._fetch(query)

    def count(self, **filters) -> int:
        query = self._dao.query.filter(**filters) if filters else self._dao.query
        return query.all().total
