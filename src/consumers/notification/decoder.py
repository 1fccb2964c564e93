"""
Decoding of S3 event notification bodies.

Wire format::

    {"Records": [{"s3": {"bucket": {"name": "..."}, "object": {"key": "..."}}}]}

Only ``Records[0]`` is read.
"""

import json
from typing import Any
from urllib.parse import unquote_plus

from .models import ChangeNotification

TEST_EVENT = "s3:TestEvent"


class NotificationDecodeError(ValueError):
    """Raised when a message body is not a usable change notification"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def is_test_event(body: str) -> bool:
    """Check whether the body is the test event S3 sends when notifications are configured"""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return False
    return isinstance(payload, dict) and payload.get("Event") == TEST_EVENT


def _require_str(container: Any, field: str, path: str) -> str:
    if not isinstance(container, dict):
        raise NotificationDecodeError(f"{path} is not an object")
    value = container.get(field)
    if not isinstance(value, str):
        raise NotificationDecodeError(f"{path}.{field} is missing or not a string")
    if not value:
        raise NotificationDecodeError(f"{path}.{field} is missing or empty")
    return value


def decode_notification(body: str, unquote_keys: bool = False) -> ChangeNotification:
    """
    Decode a message body into a ChangeNotification.

    Args:
        body: Raw message body
        unquote_keys: URL-decode the object key the way S3 encodes it

    Returns:
        ChangeNotification for Records[0]

    Raises:
        NotificationDecodeError: If the body is not JSON, has no records,
            or the first record lacks a bucket name or object key
    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as e:
        raise NotificationDecodeError(f"body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise NotificationDecodeError("body is not a JSON object")

    records = payload.get("Records")
    if not isinstance(records, list):
        raise NotificationDecodeError("Records is missing or not an array")
    if not records:
        raise NotificationDecodeError("Records is empty")

    record = records[0]
    if not isinstance(record, dict):
        raise NotificationDecodeError("Records[0] is not an object")

    s3 = record.get("s3")
    if not isinstance(s3, dict):
        raise NotificationDecodeError("Records[0].s3 is missing or not an object")

    bucket = _require_str(s3.get("bucket"), "name", "Records[0].s3.bucket")
    key = _require_str(s3.get("object"), "key", "Records[0].s3.object")

    if unquote_keys:
        key = unquote_plus(key)

    event_name = record.get("eventName")
    return ChangeNotification(
        bucket=bucket,
        key=key,
        event_name=event_name if isinstance(event_name, str) else None,
        record_count=len(records),
    )
