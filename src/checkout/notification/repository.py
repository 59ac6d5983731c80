"""Repository for the Notification aggregate."""

from checkout.domain import checkout
from checkout.notification.notification import Notification


@checkout.repository(part_of=Notification)
class NotificationRepository:
    def find_for_recipient(self, recipient_id, unread_only=False, limit=50) -> list[Notification]:
        query = self._dao.query.filter(recipient_id=str(recipient_id))
        if unread_only:
            query = query.filter(is_read=False)
        return query.order_by("-created_at").limit(limit).all().items
