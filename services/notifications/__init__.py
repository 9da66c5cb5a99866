"""In-app notification service."""

from .notification_service import NOTIFICATION_TYPES, NotificationService

__all__ = ["NotificationService", "NOTIFICATION_TYPES"]
