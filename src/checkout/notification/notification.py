"""Notification aggregate (CQRS) — in-app messages addressed to a customer.

Notifications are created reactively from order events and read back by
the customer. They carry a small JSON payload (order id and code) so the
client can link to the order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from checkout.domain import checkout
from checkout.notification.events import NotificationCreated, NotificationRead


class NotificationType(Enum):
    ORDER = "order"


@checkout.aggregate
class Notification:
    recipient_id = Identifier(required=True)
    notification_type = String(choices=NotificationType, default=NotificationType.ORDER.value)
    title = String(required=True, max_length=255)
    message = Text(required=True)
    data = Text()  # JSON object
    is_read = Boolean(default=False)
    created_at = DateTime()
    read_at = DateTime()

    @classmethod
    def create(cls, recipient_id, title, message, data=None, notification_type=NotificationType.ORDER.value):
        notification = cls(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            data=json.dumps(data or {}),
            is_read=False,
            created_at=datetime.now(UTC),
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                title=title,
            )
        )
        return notification

    @property
    def payload(self) -> dict:
        return json.loads(self.data) if self.data else {}

    def mark_read(self, reader_id):
        if str(reader_id) != str(self.recipient_id):
            raise ValidationError({"notification": ["Only the recipient can mark a notification as read"]})
        if self.is_read:
            return

        self.is_read = True
        self.read_at = datetime.now(UTC)

        self.raise_(NotificationRead(notification_id=str(self.id), recipient_id=str(self.recipient_id)))
