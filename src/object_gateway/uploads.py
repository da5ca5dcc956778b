"""Single-shot uploads: one bounded payload, one backend write."""

import logging
from typing import IO, AsyncIterable, Optional

from starlette.datastructures import UploadFile

from object_gateway.backend import call_backend
from object_gateway.keys import resolve_object_key
from object_gateway.s3.write_objects import DEFAULT_CONTENT_TYPE, upload_s3_object
from object_gateway.schemas import PutObjectResponse
from object_gateway.size_gate import check_single_shot_size, measure_file, spool_body

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)


async def upload_single_shot(
    bucket_name: str,
    key: str,
    body: IO[bytes],
    size: int,
    content_type: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> PutObjectResponse:
    """
    Write ``body`` to ``key`` with exactly one backend call.

    The size gate runs first, so an oversized payload never reaches the backend.
    A failed write is reported as ``UpstreamError`` and is not retried.
    """
    check_single_shot_size(size)
    content_type = content_type or DEFAULT_CONTENT_TYPE
    result = await call_backend(
        upload_s3_object,
        bucket_name=bucket_name,
        object_key=key,
        file_content=body,
        content_length=size,
        content_type=content_type,
        s3_client=s3_client,
    )
    logger.info(f"Stored {size} bytes at '{key}' ({content_type})")
    return PutObjectResponse(key=key, etag=result["ETag"], size=size, type=content_type)


async def upload_form_file(
    bucket_name: str,
    path_key: str,
    file: UploadFile,
    name_field: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> PutObjectResponse:
    """
    Store the ``file`` part of a multipart form.

    The size is the form-decoded file size, which the form parser has fully
    buffered by now, so the gate still runs before the backend write.
    """
    key = resolve_object_key(path_key, name_field=name_field, filename=file.filename)
    size = file.size if file.size is not None else measure_file(file.file)
    await file.seek(0)
    return await upload_single_shot(
        bucket_name=bucket_name,
        key=key,
        body=file.file,
        size=size,
        content_type=file.content_type,
        s3_client=s3_client,
    )


async def upload_raw_body(
    bucket_name: str,
    path_key: str,
    chunks: AsyncIterable[bytes],
    declared_size: Optional[int] = None,
    content_type: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> PutObjectResponse:
    """
    Store a raw request body under the key from the URL path.

    A declared length over the ceiling is rejected before a single byte is read.
    The stored size is the number of bytes actually received.
    """
    key = resolve_object_key(path_key)
    if declared_size is not None:
        check_single_shot_size(declared_size)
    spooled, received = await spool_body(chunks)
    try:
        return await upload_single_shot(
            bucket_name=bucket_name,
            key=key,
            body=spooled.file,
            size=received,
            content_type=content_type,
            s3_client=s3_client,
        )
    finally:
        await spooled.close()
