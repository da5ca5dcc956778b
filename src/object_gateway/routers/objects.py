from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    Query,
    Request,
)
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile

from object_gateway.backend import call_backend
from object_gateway.errors import InvalidRequest
from object_gateway.keys import key_from_path, resolve_object_key, strip_leading_slash
from object_gateway.s3.delete_objects import delete_s3_object
from object_gateway.s3.read_objects import fetch_s3_object, fetch_s3_objects_metadata
from object_gateway.s3.write_objects import DEFAULT_CONTENT_TYPE
from object_gateway.schemas import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    MIN_LIST_LIMIT,
    DeleteObjectResponse,
    ListObjectsResponse,
    PutObjectResponse,
)
from object_gateway.settings import Settings
from object_gateway.size_gate import parse_declared_length
from object_gateway.uploads import upload_form_file, upload_raw_body

router = APIRouter()

CACHE_CONTROL = "public, max-age=31536000"
FORM_FILE_FIELD = "file"
FORM_NAME_FIELD = "name"


def get_path_key(request: Request) -> str:
    """The object key named by the request path, decoded exactly once."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return key_from_path(raw_path.split(b"?", 1)[0].decode("latin-1"))
    # Mangum leaves raw_path unset; `path` is already decoded there
    return strip_leading_slash(request.scope["path"])


# `/list` has to be registered ahead of the catch-all key routes
@router.get(
    "/list",
    response_model=ListObjectsResponse,
    response_model_exclude_none=True,
)
async def list_objects(
    request: Request,
    prefix: Optional[str] = Query(None, description="Only list keys starting with this prefix"),
    cursor: Optional[str] = Query(None, description="The cursor returned by the previous page"),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=MIN_LIST_LIMIT, le=MAX_LIST_LIMIT, description="Maximum number of objects"),
) -> ListObjectsResponse:
    """
    List one page of objects.

    `cursor` is only present when `truncated` is true; pass it back to get the next page.
    """
    settings: Settings = request.app.state.settings
    page = await call_backend(
        fetch_s3_objects_metadata,
        bucket_name=settings.s3_bucket_name,
        prefix=prefix,
        cursor=cursor,
        max_keys=limit,
        s3_client=request.app.state.s3_client,
    )
    return ListObjectsResponse(**page)


@router.get("/{key:path}")
async def get_object(request: Request, object_key: str = Depends(get_path_key)) -> StreamingResponse:
    """Stream an object's bytes with its content type and entity tag."""
    settings: Settings = request.app.state.settings
    key = resolve_object_key(object_key)
    s3_object = await call_backend(
        fetch_s3_object,
        bucket_name=settings.s3_bucket_name,
        object_key=key,
        s3_client=request.app.state.s3_client,
        missing_is_not_found=True,
    )
    # set directly so Starlette does not append a charset to text types
    headers = {
        "Content-Type": s3_object.get("ContentType") or DEFAULT_CONTENT_TYPE,
        "etag": s3_object["ETag"],
        "Cache-Control": CACHE_CONTROL,
        "Content-Length": str(s3_object["ContentLength"]),
    }
    body = s3_object["Body"]
    # release the backend connection once the stream ends or the client goes away
    return StreamingResponse(body.iter_chunks(), headers=headers, background=BackgroundTask(body.close))


@router.put("/{key:path}", response_model=PutObjectResponse)
async def put_object(request: Request, object_key: str = Depends(get_path_key)) -> PutObjectResponse:
    """
    Upload an object in one shot.

    Send a multipart form with a `file` part and an optional `name` field that
    overrides the key, or send the raw bytes as the body. Payloads over 100MB are
    rejected with 413; use `POST /multipart` for those.
    """
    settings: Settings = request.app.state.settings
    s3_client = request.app.state.s3_client
    content_type = request.headers.get("content-type")

    if content_type and content_type.startswith("multipart/form-data"):
        async with request.form() as form:
            file = form.get(FORM_FILE_FIELD)
            if not isinstance(file, UploadFile):
                raise InvalidRequest("No file provided")
            name_field = form.get(FORM_NAME_FIELD)
            return await upload_form_file(
                bucket_name=settings.s3_bucket_name,
                path_key=object_key,
                file=file,
                name_field=name_field if isinstance(name_field, str) else None,
                s3_client=s3_client,
            )

    return await upload_raw_body(
        bucket_name=settings.s3_bucket_name,
        path_key=object_key,
        chunks=request.stream(),
        declared_size=parse_declared_length(request.headers.get("content-length")),
        content_type=content_type,
        s3_client=s3_client,
    )


@router.post("/{key:path}", include_in_schema=False)
async def post_elsewhere() -> None:
    raise InvalidRequest("Invalid endpoint")


@router.delete("/{key:path}", response_model=DeleteObjectResponse)
async def delete_object(request: Request, object_key: str = Depends(get_path_key)) -> DeleteObjectResponse:
    """Delete an object. Deleting a key that does not exist is not an error."""
    settings: Settings = request.app.state.settings
    key = resolve_object_key(object_key)
    await call_backend(
        delete_s3_object,
        bucket_name=settings.s3_bucket_name,
        object_key=key,
        s3_client=request.app.state.s3_client,
    )
    return DeleteObjectResponse(deleted=key)
