"""
Pytest configuration and shared fixtures.
"""

import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from src.consumers.notification.models import ConsumerConfig

QUEUE_URL = "https://sqs.eu-central-1.amazonaws.com/123456789012/test-queue"


def _make_body(bucket="my-bucket", key="file.txt", extra_records=0, event_name=None):
    """Build an S3 event notification body."""
    record = {"s3": {"bucket": {"name": bucket}, "object": {"key": key}}}
    if event_name:
        record["eventName"] = event_name
    records = [record] + [
        {"s3": {"bucket": {"name": f"other-{i}"}, "object": {"key": f"other-{i}.txt"}}}
        for i in range(extra_records)
    ]
    return json.dumps({"Records": records})


def _make_sqs_message(body, message_id="msg-1", receipt_handle="rh-1"):
    """Build one entry of a ReceiveMessage response."""
    return {"MessageId": message_id, "Body": body, "ReceiptHandle": receipt_handle}


def _client_error(code="InternalError", operation="ReceiveMessage"):
    """Build a botocore ClientError."""
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


@pytest.fixture
def consumer_config():
    """Basic consumer configuration for testing."""
    return ConsumerConfig(
        queue_url=QUEUE_URL,
        aws_region="eu-central-1",
        wait_time_seconds=0,
        backoff_initial_seconds=0.5,
        backoff_max_seconds=4.0,
        backoff_multiplier=2.0,
    )


@pytest.fixture
def sqs_client():
    """Mock SQS client returning no messages by default."""
    client = MagicMock()
    client.receive_message.return_value = {}
    return client


@pytest.fixture
def s3_client():
    """Mock S3 client returning empty metadata by default."""
    client = MagicMock()
    client.head_object.return_value = {"Metadata": {}}
    return client


@pytest.fixture
def make_body():
    """Factory for S3 event notification bodies."""
    return _make_body


@pytest.fixture
def make_sqs_message():
    """Factory for ReceiveMessage entries."""
    return _make_sqs_message


@pytest.fixture
def client_error():
    """Factory for botocore ClientError instances."""
    return _client_error
