"""Functions for writing objects to an S3 bucket--the "C" and "U" in CRUD."""

from typing import IO, Optional

import boto3

from object_gateway.utils.decorators import log_execution_time

try:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import PutObjectOutputTypeDef
except ImportError:
    ...

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@log_execution_time
def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: IO[bytes],
    content_length: int,
    content_type: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> "PutObjectOutputTypeDef":
    """
    Upload an object to an S3 bucket in a single ``put_object`` call.

    An existing object at ``object_key`` is replaced.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: A readable file object positioned at the start of the content.
    :param content_length: The number of bytes ``file_content`` holds.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    content_type = content_type or DEFAULT_CONTENT_TYPE
    s3_client = s3_client or boto3.client("s3")
    return s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        ContentLength=content_length,
        ContentType=content_type,
    )
