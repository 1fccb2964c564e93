"""
Notification Consumer - CLI Entry Point
Polls SQS for S3 change notifications and logs the metadata of each referenced object
"""

import argparse
import logging
import os
import sys

import structlog

from src.consumers.notification.consumer import NotificationConsumer
from src.consumers.notification.models import ConsumerConfig
from src.core.logger import setup_logging

logger = structlog.get_logger(__name__)


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Notification Consumer for SQS → S3 object metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Queue URL from the environment
        export PROCESS_QUEUE_URL=https://sqs.eu-central-1.amazonaws.com/123456789012/uploads
        python -m src.consumers.notification.consume

        # Explicit queue and region, run for five minutes
        python -m src.consumers.notification.consume --queue-url <url> --region us-east-1 --duration 300

        # Against LocalStack
        python -m src.consumers.notification.consume --endpoint-url http://localhost:4566
        """,
    )

    # Queue settings
    parser.add_argument(
        "--queue-url",
        default=os.getenv("PROCESS_QUEUE_URL", ""),
        help="SQS queue URL to poll (default: PROCESS_QUEUE_URL env var)",
    )
    parser.add_argument(
        "--max-messages",
        type=int,
        default=int(os.getenv("SQS_MAX_MESSAGES", "10")),
        help="Messages requested per poll, 1-10 (default: 10 or SQS_MAX_MESSAGES env var)",
    )
    parser.add_argument(
        "--wait-time",
        type=int,
        default=int(os.getenv("SQS_WAIT_TIME_SECONDS", "0")),
        help="Long polling wait in seconds, 0-20 (default: 0 or SQS_WAIT_TIME_SECONDS env var)",
    )
    parser.add_argument(
        "--visibility-timeout",
        type=int,
        default=_optional_int(os.getenv("SQS_VISIBILITY_TIMEOUT")),
        help="Visibility timeout for received messages (default: queue setting)",
    )

    # AWS settings
    parser.add_argument(
        "--region",
        default=os.getenv("AWS_REGION", "eu-central-1"),
        help="AWS region (default: eu-central-1 or AWS_REGION env var)",
    )
    parser.add_argument(
        "--profile",
        default=os.getenv("AWS_PROFILE"),
        help="AWS credentials profile (default: AWS_PROFILE env var)",
    )
    parser.add_argument(
        "--endpoint-url",
        default=os.getenv("AWS_ENDPOINT_URL"),
        help="Custom endpoint for SQS and S3 (default: AWS_ENDPOINT_URL env var)",
    )

    # Consumer behavior
    parser.add_argument(
        "--backoff-initial",
        type=float,
        default=0.5,
        help="First delay after a failed poll in seconds (default: 0.5)",
    )
    parser.add_argument(
        "--backoff-max",
        type=float,
        default=30.0,
        help="Upper bound for the poll failure delay in seconds (default: 30.0)",
    )
    parser.add_argument(
        "--delete-undecodable",
        action="store_true",
        default=_env_flag("DELETE_UNDECODABLE"),
        help="Delete messages that are not valid S3 notifications instead of leaving them for redrive",
    )
    parser.add_argument(
        "--unquote-keys",
        action="store_true",
        default=_env_flag("UNQUOTE_KEYS"),
        help="URL-decode object keys before fetching metadata",
    )
    parser.add_argument(
        "--stats-interval",
        type=float,
        default=60.0,
        help="Seconds between stats log lines (default: 60.0)",
    )

    # Runtime settings
    parser.add_argument(
        "--duration",
        type=int,
        help="Duration to run in seconds (default: infinite)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )

    return parser.parse_args(argv)


def build_config_from_args(args) -> ConsumerConfig:
    """Build a ConsumerConfig from command-line arguments"""
    config = ConsumerConfig(
        queue_url=args.queue_url,
        max_messages=args.max_messages,
        wait_time_seconds=args.wait_time,
        visibility_timeout=args.visibility_timeout,
        aws_region=args.region,
        aws_profile=args.profile,
        endpoint_url=args.endpoint_url,
        backoff_initial_seconds=args.backoff_initial,
        backoff_max_seconds=args.backoff_max,
        delete_undecodable=args.delete_undecodable,
        unquote_keys=args.unquote_keys,
        stats_interval_seconds=args.stats_interval,
    )

    logger.info("Configuration built from arguments", config=config)
    return config


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = getattr(logging, args.log_level)
    setup_logging(level=log_level)

    logger.info("Starting Notification Consumer")

    try:
        config = build_config_from_args(args)

        consumer = NotificationConsumer(config)
        consumer.run(duration_seconds=args.duration)

        logger.info("Consumer completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.error("Consumer failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
