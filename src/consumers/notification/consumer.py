"""
Notification consumer that resolves S3 change notifications from SQS to object metadata.
"""

import time
from typing import Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from src.core.aws import create_clients

from .backoff import ExponentialBackoff
from .decoder import NotificationDecodeError, decode_notification, is_test_event
from .models import ChangeNotification, ConsumerConfig, QueueMessage

logger = structlog.get_logger(__name__)

SERVICE_ERRORS = (BotoCoreError, ClientError)


class NotificationConsumer:
    """Polls SQS for S3 notifications, logs object metadata and deletes each message"""

    def __init__(self, config: ConsumerConfig, sqs_client=None, s3_client=None):
        self.config = config
        logger.info("Initializing notification consumer", queue_url=config.queue_url)

        config.validate()

        if sqs_client is None or s3_client is None:
            default_sqs, default_s3 = create_clients(config)
            sqs_client = sqs_client or default_sqs
            s3_client = s3_client or default_s3

        self.sqs = sqs_client
        self.s3 = s3_client

        self.backoff = ExponentialBackoff(
            initial=config.backoff_initial_seconds,
            maximum=config.backoff_max_seconds,
            multiplier=config.backoff_multiplier,
        )

        self.stats = {
            "polls": 0,
            "poll_errors": 0,
            "total_received": 0,
            "processed": 0,
            "decode_errors": 0,
            "test_events": 0,
            "metadata_errors": 0,
            "acknowledged": 0,
            "ack_errors": 0,
        }

    def poll_batch(self) -> Optional[list[QueueMessage]]:
        """Receive up to max_messages messages. Returns None if the receive call failed."""
        self.stats["polls"] += 1

        params = {
            "QueueUrl": self.config.queue_url,
            "MaxNumberOfMessages": self.config.max_messages,
            "WaitTimeSeconds": self.config.wait_time_seconds,
        }
        if self.config.visibility_timeout is not None:
            params["VisibilityTimeout"] = self.config.visibility_timeout

        try:
            response = self.sqs.receive_message(**params)
        except SERVICE_ERRORS as e:
            self.stats["poll_errors"] += 1
            logger.error(
                "Failed to receive messages", queue_url=self.config.queue_url, error=str(e)
            )
            return None

        messages = [QueueMessage.from_sqs(m) for m in response.get("Messages", [])]
        self.stats["total_received"] += len(messages)

        if messages:
            logger.debug("Batch received", count=len(messages))
        return messages

    def fetch_metadata(self, notification: ChangeNotification) -> Optional[dict[str, str]]:
        """Fetch user metadata of the referenced object without transferring its body"""
        try:
            response = self.s3.head_object(Bucket=notification.bucket, Key=notification.key)
        except SERVICE_ERRORS as e:
            self.stats["metadata_errors"] += 1
            logger.error(
                "Failed to fetch object metadata",
                bucket=notification.bucket,
                key=notification.key,
                error=str(e),
            )
            return None

        return response.get("Metadata", {})

    def acknowledge(self, message: QueueMessage) -> bool:
        """Delete the message from the queue. Failures are logged, not retried."""
        try:
            self.sqs.delete_message(
                QueueUrl=self.config.queue_url, ReceiptHandle=message.receipt_handle
            )
        except SERVICE_ERRORS as e:
            self.stats["ack_errors"] += 1
            logger.error("Failed to delete message", message_id=message.message_id, error=str(e))
            return False

        self.stats["acknowledged"] += 1
        logger.info("Message deleted", message_id=message.message_id)
        return True

    def process_message(self, message: QueueMessage) -> bool:
        """Decode, fetch metadata, log it and acknowledge. Returns True if the message was deleted."""
        logger.debug("Message received", message_id=message.message_id, body=message.body)

        if is_test_event(message.body):
            self.stats["test_events"] += 1
            logger.info("Skipping S3 test event", message_id=message.message_id)
            return self.acknowledge(message)

        try:
            notification = decode_notification(message.body, unquote_keys=self.config.unquote_keys)
        except NotificationDecodeError as e:
            self.stats["decode_errors"] += 1
            logger.error(
                "Failed to decode notification",
                message_id=message.message_id,
                reason=e.reason,
                deleted=self.config.delete_undecodable,
            )
            if self.config.delete_undecodable:
                return self.acknowledge(message)
            return False

        if notification.record_count > 1:
            logger.warning(
                "Only the first record is processed",
                message_id=message.message_id,
                record_count=notification.record_count,
            )

        metadata = self.fetch_metadata(notification)
        if metadata is not None:
            for name, value in metadata.items():
                logger.info(
                    "Object metadata",
                    bucket=notification.bucket,
                    key=notification.key,
                    name=name,
                    value=value,
                )
            logger.info(
                "Notification processed",
                message_id=message.message_id,
                bucket=notification.bucket,
                key=notification.key,
                event_name=notification.event_name,
                metadata_keys=len(metadata),
            )

        self.stats["processed"] += 1
        return self.acknowledge(message)

    def run_once(self) -> int:
        """Poll one batch and process it sequentially. Returns the number of messages received."""
        messages = self.poll_batch()

        if messages is None:
            delay = self.backoff.next_delay()
            logger.warning(
                "Backing off before next poll",
                delay_seconds=delay,
                consecutive_failures=self.backoff.failures,
            )
            time.sleep(delay)
            return 0

        self.backoff.reset()

        for message in messages:
            self.process_message(message)

        return len(messages)

    def _log_stats(self, event: str, elapsed: float):
        logger.info(event, **self.stats, elapsed_sec=round(elapsed, 1))

    def run(self, duration_seconds: int = None):
        """Run the consumer continuously or for a specified duration

        Args:
            duration_seconds: Optional duration in seconds. If None, runs indefinitely.
        """
        logger.info(
            "Starting notification consumer",
            queue_url=self.config.queue_url,
            duration=duration_seconds if duration_seconds else "indefinite",
        )

        start_time = time.time()
        last_log_time = start_time

        try:
            while True:
                self.run_once()

                now = time.time()
                elapsed = now - start_time
                if now - last_log_time >= self.config.stats_interval_seconds:
                    self._log_stats("Consumer stats", elapsed)
                    last_log_time = now

                if duration_seconds and elapsed >= duration_seconds:
                    logger.info("Duration limit reached", duration_seconds=duration_seconds)
                    break

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, stopping consumer")

        except Exception as e:
            logger.error("Consumer error", error=str(e), exc_info=True)
            raise

        finally:
            self._log_stats("Consumer stopped", time.time() - start_time)
