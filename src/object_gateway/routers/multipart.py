import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from object_gateway.errors import InvalidRequest
from object_gateway.multipart import (
    complete_upload,
    initiate_upload,
    parse_multipart_request,
    upload_part,
)
from object_gateway.schemas import InitiateUpload, UploadPart
from object_gateway.settings import Settings
from object_gateway.size_gate import spool_body

router = APIRouter()

# Query parameters that mark the body as part bytes instead of a JSON descriptor
DESCRIPTOR_QUERY_PARAMS = {"key", "uploadId", "partNumber"}


def _declares_body(request: Request) -> bool:
    if "transfer-encoding" in request.headers:
        return True
    content_length = request.headers.get("content-length", "")
    return content_length.isdigit() and int(content_length) > 0


async def _read_json_fields(request: Request):
    body = await request.body()
    if not body:
        raise InvalidRequest("Invalid multipart upload request: empty body")
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequest(f"Invalid multipart upload request: {exc}") from exc


@router.post("/multipart")
async def multipart_upload(request: Request) -> JSONResponse:
    """
    Drive a multipart upload session.

    The request is one of three shapes:

    - initiate: JSON `{"key": ...}`, answered with `{"uploadId": ...}`
    - upload part: `?key=&uploadId=&partNumber=` with the part bytes as the body,
      answered with `{"etag": ..., "partNumber": ...}`
    - complete: JSON `{"key": ..., "uploadId": ..., "parts": [{"partNumber": ..., "etag": ...}]}`,
      answered with `{"key": ..., "etag": ...}`
    """
    settings: Settings = request.app.state.settings
    s3_client = request.app.state.s3_client

    if DESCRIPTOR_QUERY_PARAMS & set(request.query_params.keys()):
        fields = dict(request.query_params)
        has_body = _declares_body(request)
    else:
        fields = await _read_json_fields(request)
        has_body = False

    multipart_request = parse_multipart_request(fields, has_body=has_body)

    if isinstance(multipart_request, InitiateUpload):
        result = await initiate_upload(multipart_request, settings.s3_bucket_name, s3_client=s3_client)
    elif isinstance(multipart_request, UploadPart):
        # parts have no single-shot ceiling
        spooled, received = await spool_body(request.stream(), enforce_ceiling=False)
        try:
            if received == 0:
                raise InvalidRequest("Part upload requires a request body")
            result = await upload_part(
                multipart_request,
                body=spooled.file,
                body_size=received,
                bucket_name=settings.s3_bucket_name,
                s3_client=s3_client,
            )
        finally:
            await spooled.close()
    else:
        result = await complete_upload(multipart_request, settings.s3_bucket_name, s3_client=s3_client)

    return JSONResponse(content=result.model_dump(by_alias=True))
