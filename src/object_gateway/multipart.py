"""
Multipart upload orchestration.

A session lives entirely in the backend. Each request carries everything needed
to address it: ``key`` and ``uploadId`` always, and the full ``parts`` list on
completion. Nothing is kept between requests and nothing is retried.
"""

import logging
from typing import IO, Any, Optional

import pydantic

from object_gateway.backend import call_backend
from object_gateway.errors import InvalidRequest
from object_gateway.s3.multipart_uploads import (
    complete_s3_multipart_upload,
    create_s3_multipart_upload,
    upload_s3_part,
)
from object_gateway.schemas import (
    CompleteUpload,
    CompleteUploadResponse,
    InitiateUpload,
    InitiateUploadResponse,
    MultipartRequest,
    UploadPart,
    UploadPartResponse,
)

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)


def parse_multipart_request(fields: Any, has_body: bool = False) -> MultipartRequest:
    """
    Decode the fields of a multipart request into exactly one request variant.

    - no ``uploadId``: :class:`InitiateUpload`
    - ``uploadId`` and ``partNumber``: :class:`UploadPart` (needs a body)
    - ``uploadId`` and a non-empty ``parts`` list: :class:`CompleteUpload`

    :raises InvalidRequest: when no variant matches or the matching one does not validate.
    """
    if not isinstance(fields, dict):
        raise InvalidRequest("Invalid multipart upload request")

    try:
        if not fields.get("uploadId"):
            return InitiateUpload.model_validate(fields)
        if fields.get("partNumber") is not None:
            if not has_body:
                raise InvalidRequest("Part upload requires a request body")
            return UploadPart.model_validate(fields)
        if fields.get("parts"):
            return CompleteUpload.model_validate(fields)
    except pydantic.ValidationError as exc:
        raise InvalidRequest(f"Invalid multipart upload request: {exc.errors()[0]['msg']}") from exc

    raise InvalidRequest("Invalid multipart upload request")


async def initiate_upload(
    request: InitiateUpload, bucket_name: str, s3_client: Optional["S3Client"] = None
) -> InitiateUploadResponse:
    upload_id = await call_backend(
        create_s3_multipart_upload,
        bucket_name=bucket_name,
        object_key=request.key,
        content_type=request.content_type,
        s3_client=s3_client,
    )
    logger.info(f"Opened multipart upload for '{request.key}'")
    return InitiateUploadResponse(upload_id=upload_id)


async def upload_part(
    request: UploadPart,
    body: IO[bytes],
    body_size: int,
    bucket_name: str,
    s3_client: Optional["S3Client"] = None,
) -> UploadPartResponse:
    """Send one part. A failure leaves the session open for the caller to retry the part."""
    etag = await call_backend(
        upload_s3_part,
        bucket_name=bucket_name,
        object_key=request.key,
        upload_id=request.upload_id,
        part_number=request.part_number,
        body=body,
        content_length=body_size,
        s3_client=s3_client,
    )
    logger.info(f"Uploaded part {request.part_number} ({body_size} bytes) of '{request.key}'")
    return UploadPartResponse(etag=etag, part_number=request.part_number)


async def complete_upload(
    request: CompleteUpload, bucket_name: str, s3_client: Optional["S3Client"] = None
) -> CompleteUploadResponse:
    result = await call_backend(
        complete_s3_multipart_upload,
        bucket_name=bucket_name,
        object_key=request.key,
        upload_id=request.upload_id,
        parts=[{"PartNumber": part.part_number, "ETag": part.etag} for part in request.parts],
        s3_client=s3_client,
    )
    logger.info(f"Completed multipart upload of '{request.key}' from {len(request.parts)} parts")
    return CompleteUploadResponse(key=request.key, etag=result["ETag"])
