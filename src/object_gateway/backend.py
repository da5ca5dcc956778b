"""Run blocking backend calls off the event loop and translate their failures."""

import functools
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from object_gateway.errors import translate_backend_error

T = TypeVar("T")


async def call_backend(func: Callable[..., T], *args: Any, missing_is_not_found: bool = False, **kwargs: Any) -> T:
    """
    Await a boto3-backed function in the threadpool.

    The request task suspends until the call finishes; other requests keep running.
    botocore failures come back as ``UpstreamError`` (or ``NotFound`` when
    ``missing_is_not_found`` is set and the key does not exist). Nothing is retried.
    """
    try:
        return await run_in_threadpool(functools.partial(func, *args, **kwargs))
    except (ClientError, BotoCoreError) as exc:
        raise translate_backend_error(exc, missing_is_not_found=missing_is_not_found) from exc
