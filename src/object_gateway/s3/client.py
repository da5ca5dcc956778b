"""Construction of the boto3 S3 client the gateway talks to."""

import logging
import boto3

from object_gateway.settings import Settings

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> "S3Client":
    """
    Build an S3 client from the gateway settings.

    ``aws_endpoint_url`` lets the gateway front any S3-compatible store.
    """
    logger.info(f"Creating S3 client (region={settings.aws_region}, endpoint={settings.aws_endpoint_url or 'aws'})")
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )

