"""
boto3 client construction for the queue and object-store collaborators.
"""

import boto3
import structlog
from botocore.config import Config

logger = structlog.get_logger(__name__)


def create_session(region: str, profile: str | None = None) -> boto3.session.Session:
    """Create a boto3 session bound to an explicit region (and profile, if any)."""
    return boto3.session.Session(region_name=region, profile_name=profile)


def create_clients(config) -> tuple:
    """
    Build the (sqs, s3) client pair for a consumer configuration.

    Clients are long-lived and reused across loop iterations. Any failure
    here (unknown profile, missing region, bad endpoint) is fatal and
    propagates to the caller.

    Args:
        config: A ConsumerConfig providing aws_region, aws_profile and endpoint_url.

    Returns:
        Tuple of (sqs_client, s3_client)
    """
    try:
        session = create_session(config.aws_region, config.aws_profile)
        client_config = Config(retries={"mode": "standard"})

        sqs_client = session.client(
            "sqs", endpoint_url=config.endpoint_url, config=client_config
        )
        s3_client = session.client(
            "s3", endpoint_url=config.endpoint_url, config=client_config
        )
        logger.info(
            "AWS clients initialized",
            region=config.aws_region,
            profile=config.aws_profile,
            endpoint_url=config.endpoint_url,
        )
        return sqs_client, s3_client
    except Exception as e:
        logger.error("Failed to initialize AWS clients", error=str(e))
        raise
