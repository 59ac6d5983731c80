"""Repository for the Promotion aggregate."""

from checkout.domain import checkout
from checkout.promotion.promotion import Promotion, PromotionStatus, normalize_code


@checkout.repository(part_of=Promotion)
class PromotionRepository:
    def find_by_code(self, code: str) -> Promotion | None:
        """Find a promotion by its code, case-insensitively."""
        return self._dao.query.filter(code=normalize_code(code)).all().first

    def find_active(self) -> list[Promotion]:
        return self._dao.query.filter(status=PromotionStatus.ACTIVE.value).order_by("-created_at").all().items

    def find_all(self) -> list[Promotion]:
        return self._dao.query.order_by("-created_at").all().items
