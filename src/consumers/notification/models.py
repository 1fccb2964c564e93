"""
Data models and configuration for the storage notification consumer.
"""

from dataclasses import dataclass
from typing import Any, Optional

# SQS ReceiveMessage limits
MAX_BATCH_SIZE = 10
MAX_WAIT_TIME_SECONDS = 20


@dataclass
class ConsumerConfig:
    """Configuration for the notification consumer"""

    # Queue settings
    queue_url: str = ""
    max_messages: int = MAX_BATCH_SIZE
    wait_time_seconds: int = 0  # Up to 20 enables long polling
    visibility_timeout: Optional[int] = None  # Queue default when unset

    # AWS settings
    aws_region: str = "eu-central-1"
    aws_profile: Optional[str] = None
    endpoint_url: Optional[str] = None  # e.g. LocalStack

    # Poll failure backoff
    backoff_initial_seconds: float = 0.5
    backoff_max_seconds: float = 30.0
    backoff_multiplier: float = 2.0

    # Message handling
    delete_undecodable: bool = False  # Leave for the queue's redrive policy by default
    unquote_keys: bool = False  # S3 URL-encodes object keys in notifications

    stats_interval_seconds: float = 60.0

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot drive a consumer"""
        if not self.queue_url:
            raise ValueError("queue_url is required")
        if not 1 <= self.max_messages <= MAX_BATCH_SIZE:
            raise ValueError(f"max_messages must be between 1 and {MAX_BATCH_SIZE}")
        if not 0 <= self.wait_time_seconds <= MAX_WAIT_TIME_SECONDS:
            raise ValueError(f"wait_time_seconds must be between 0 and {MAX_WAIT_TIME_SECONDS}")
        if self.visibility_timeout is not None and self.visibility_timeout < 0:
            raise ValueError("visibility_timeout must not be negative")
        if self.backoff_initial_seconds <= 0:
            raise ValueError("backoff_initial_seconds must be positive")
        if self.backoff_max_seconds < self.backoff_initial_seconds:
            raise ValueError("backoff_max_seconds must be >= backoff_initial_seconds")
        if self.backoff_multiplier < 1.0:
            raise ValueError("backoff_multiplier must be >= 1.0")


@dataclass(frozen=True)
class QueueMessage:
    """A single delivery of a queue message"""

    message_id: str
    body: str
    receipt_handle: str

    @classmethod
    def from_sqs(cls, message: dict[str, Any]) -> "QueueMessage":
        """Build from one entry of a ReceiveMessage response"""
        return cls(
            message_id=message.get("MessageId", ""),
            body=message.get("Body", ""),
            receipt_handle=message["ReceiptHandle"],
        )


@dataclass(frozen=True)
class ChangeNotification:
    """The object referenced by the first record of a storage change notification"""

    bucket: str
    key: str
    event_name: Optional[str] = None
    record_count: int = 1
