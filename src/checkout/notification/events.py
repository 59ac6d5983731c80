"""Domain events for the Notification aggregate."""

from protean.fields import Identifier, String

from checkout.domain import checkout


@checkout.event(part_of="Notification")
class NotificationCreated:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    notification_type = String(required=True)
    title = String(required=True)


@checkout.event(part_of="Notification")
class NotificationRead:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
