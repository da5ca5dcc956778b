"""Functions driving S3 multipart upload sessions."""

from typing import IO, List, Optional

import boto3

from object_gateway.utils.decorators import log_execution_time

try:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import CompletedPartTypeDef, CompleteMultipartUploadOutputTypeDef
except ImportError:
    ...


@log_execution_time
def create_s3_multipart_upload(
    bucket_name: str,
    object_key: str,
    content_type: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """
    Open a multipart upload session.

    :return: the ``UploadId`` that addresses the session together with ``object_key``.
    """
    s3_client = s3_client or boto3.client("s3")
    create_kwargs = {"Bucket": bucket_name, "Key": object_key}
    if content_type:
        create_kwargs["ContentType"] = content_type
    response = s3_client.create_multipart_upload(**create_kwargs)
    return response["UploadId"]


@log_execution_time
def upload_s3_part(
    bucket_name: str,
    object_key: str,
    upload_id: str,
    part_number: int,
    body: IO[bytes],
    content_length: int,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """
    Upload one part of an open multipart session.

    :return: the part's ``ETag``, which the caller must echo back on completion.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.upload_part(
        Bucket=bucket_name,
        Key=object_key,
        UploadId=upload_id,
        PartNumber=part_number,
        Body=body,
        ContentLength=content_length,
    )
    return response["ETag"]


@log_execution_time
def complete_s3_multipart_upload(
    bucket_name: str,
    object_key: str,
    upload_id: str,
    parts: List["CompletedPartTypeDef"],
    s3_client: Optional["S3Client"] = None,
) -> "CompleteMultipartUploadOutputTypeDef":
    """
    Assemble the uploaded parts into the final object.

    ``parts`` is passed through as given; S3 validates numbering and order.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.complete_multipart_upload(
        Bucket=bucket_name,
        Key=object_key,
        UploadId=upload_id,
        MultipartUpload={"Parts": parts},
    )
