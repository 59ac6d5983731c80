"""Repository for the ShoppingCart aggregate."""

from checkout.cart.cart import ShoppingCart
from checkout.domain import checkout


@checkout.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_customer(self, customer_id) -> ShoppingCart | None:
        return self._dao.query.filter(customer_id=str(customer_id)).all().first
