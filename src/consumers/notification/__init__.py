"""
Notification Consumer - SQS S3 event notifications to object metadata.
"""

from .consumer import NotificationConsumer
from .decoder import NotificationDecodeError, decode_notification
from .models import ChangeNotification, ConsumerConfig, QueueMessage

__all__ = [
    "NotificationConsumer",
    "ConsumerConfig",
    "QueueMessage",
    "ChangeNotification",
    "NotificationDecodeError",
    "decode_notification",
]
