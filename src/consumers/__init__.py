"""
Queue consumers for storage change notifications.
"""

# Notification consumer (SQS → S3 object metadata)
from .notification import ConsumerConfig, NotificationConsumer

__all__ = ["NotificationConsumer", "ConsumerConfig"]
