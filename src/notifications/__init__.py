from src.config.settings import settings
from src.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcherBase,
    WebhookNotificationDispatcher,
)


def get_notification_dispatcher() -> NotificationDispatcherBase:
    if settings.NOTIFICATION_WEBHOOK_URL:
        return WebhookNotificationDispatcher(url=settings.NOTIFICATION_WEBHOOK_URL)
    return LoggingNotificationDispatcher()


__all__ = [
    "NotificationDispatcherBase",
    "LoggingNotificationDispatcher",
    "WebhookNotificationDispatcher",
    "get_notification_dispatcher",
]
