"""Marking notifications as read — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.notification.notification import Notification


@checkout.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    reader_id = Identifier(required=True)


@checkout.command_handler(part_of=Notification)
class NotificationReadHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.mark_read(command.reader_id)
        repo.add(notification)
