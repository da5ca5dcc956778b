"""Size policy for the single-shot upload path."""

import logging
from tempfile import SpooledTemporaryFile
from typing import AsyncIterable, Optional

from starlette.datastructures import UploadFile

from object_gateway.errors import InvalidRequest, PayloadTooLarge

logger = logging.getLogger(__name__)

SINGLE_SHOT_CEILING_BYTES = 100_000_000
# Bodies below this stay in memory while being counted, larger ones roll over to disk
SPOOL_MAX_MEMORY_BYTES = 8 * 1024 * 1024


def check_single_shot_size(size: int) -> int:
    """
    Allow ``size`` on the single-shot path or reject it in favor of multipart upload.

    :raises PayloadTooLarge: when ``size`` is over the ceiling.
    """
    if size > SINGLE_SHOT_CEILING_BYTES:
        logger.info(f"Rejecting single-shot upload of {size} bytes (ceiling {SINGLE_SHOT_CEILING_BYTES})")
        raise PayloadTooLarge()
    return size


def parse_declared_length(content_length: Optional[str]) -> Optional[int]:
    """Read a ``Content-Length`` header value, returning None when it is absent."""
    if content_length is None or content_length == "":
        return None
    try:
        declared = int(content_length)
    except ValueError:
        raise InvalidRequest(f"Invalid Content-Length: {content_length}")
    if declared < 0:
        raise InvalidRequest(f"Invalid Content-Length: {content_length}")
    return declared


def measure_file(file_obj) -> int:
    """Size of a seekable file object, leaving it rewound to the start."""
    file_obj.seek(0, 2)
    size = file_obj.tell()
    file_obj.seek(0)
    return size


async def spool_body(chunks: AsyncIterable[bytes], enforce_ceiling: bool = True) -> tuple[UploadFile, int]:
    """
    Buffer a request body into a spooled temporary file while counting its bytes.

    Writes go through ``UploadFile``, which moves them to the threadpool once the
    file has rolled over to disk. With ``enforce_ceiling`` the body is rejected as
    soon as the running count passes the single-shot ceiling, before the caller
    gets a chance to hand anything to the backend.

    :return: the rewound upload (the caller closes it) and the number of bytes received.
    :raises PayloadTooLarge: when the ceiling is enforced and exceeded.
    """
    upload = UploadFile(file=SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY_BYTES))
    received = 0
    try:
        async for chunk in chunks:
            received += len(chunk)
            if enforce_ceiling:
                check_single_shot_size(received)
            await upload.write(chunk)
        await upload.seek(0)
    except BaseException:
        await upload.close()
        raise
    return upload, received
