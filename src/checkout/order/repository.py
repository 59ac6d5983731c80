"""Repository for the Order aggregate."""

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.repository(part_of=Order)
class OrderRepository:
    def find_by_code(self, order_code: str) -> Order | None:
        return self._dao.query.filter(order_code=order_code).all().first

    def find_by_idempotency_key(self, customer_id, idempotency_key: str) -> Order | None:
        return (
            self._dao.query.filter(customer_id=str(customer_id), idempotency_key=idempotency_key).all().first
        )

    def find_for_customer(self, customer_id, status=None, offset=0, limit=10):
        """Page through a customer's orders, newest first."""
        query = self._dao.query.filter(customer_id=str(customer_id))
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").offset(offset).limit(limit).all()

    def find_all(self, status=None, offset=0, limit=20):
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").offset(offset).limit(limit).all()
