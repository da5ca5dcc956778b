"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import Any, Dict, Optional

import boto3

from object_gateway.utils.decorators import log_execution_time

try:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import GetObjectOutputTypeDef
except ImportError:
    ...

DEFAULT_MAX_KEYS = 1000


@log_execution_time
def fetch_s3_object(
    bucket_name: str,
    object_key: str,
    s3_client: Optional["S3Client"] = None,
) -> "GetObjectOutputTypeDef":
    """
    Fetch an object, body included, from an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: The ``get_object`` response; ``Body`` is a streaming body the caller must drain or close.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.get_object(Bucket=bucket_name, Key=object_key)


@log_execution_time
def fetch_s3_objects_metadata(
    bucket_name: str,
    prefix: Optional[str] = None,
    cursor: Optional[str] = None,
    max_keys: int = DEFAULT_MAX_KEYS,
    s3_client: Optional["S3Client"] = None,
) -> Dict[str, Any]:
    """
    Fetch one page of object metadata from an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param prefix: Only keys starting with this prefix are listed.
    :param cursor: Continuation token returned by the previous page.
    :param max_keys: The maximum number of objects to return.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: ``{"objects": [...], "truncated": bool, "cursor": str | None}`` where each
        object carries ``name``, ``size`` and ``uploaded`` (a datetime).
    """
    s3_client = s3_client or boto3.client("s3")
    list_kwargs: Dict[str, Any] = {"Bucket": bucket_name, "MaxKeys": max_keys}
    if prefix:
        list_kwargs["Prefix"] = prefix
    if cursor:
        list_kwargs["ContinuationToken"] = cursor
    response = s3_client.list_objects_v2(**list_kwargs)

    objects = [
        {
            "name": item["Key"],
            "size": item["Size"],
            "uploaded": item["LastModified"],
        }
        for item in response.get("Contents", [])
    ]
    truncated = bool(response.get("IsTruncated", False))
    return {
        "objects": objects,
        "truncated": truncated,
        "cursor": response.get("NextContinuationToken") if truncated else None,
    }
