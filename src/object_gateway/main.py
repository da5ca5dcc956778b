from textwrap import dedent
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from object_gateway.cors import apply_cors_headers
from object_gateway.errors import (
    GatewayError,
    handle_broad_exceptions,
    handle_gateway_errors,
    handle_http_exceptions,
    handle_request_validation_errors,
)
from object_gateway.routers.multipart import router as multipart_router
from object_gateway.routers.objects import router as objects_router
from object_gateway.s3.client import create_s3_client
from object_gateway.settings import Settings

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, s3_client=None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Object Gateway",
        summary="CRUD and multipart uploads over an S3-compatible object store",
        version="v1",  # a fancier version would read the semver from pkg metadata
        description=dedent(
            """\
        | Endpoint | Notes |
        | --- | --- |
        | `GET /list` | Paginated listing, follow `cursor` while `truncated` is true |
        | `GET/PUT/DELETE /{key}` | Single objects, uploads up to 100MB |
        | `POST /multipart` | Initiate, upload parts, complete |
        """
        ),
        # the root path is an object key, so the docs live elsewhere
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.state.settings = settings
    app.state.s3_client = s3_client or create_s3_client(settings)
    logger.info(f"Serving bucket '{settings.s3_bucket_name}'")

    # multipart first so POST /multipart is not taken for an object key
    app.include_router(multipart_router, tags=["multipart"])
    app.include_router(objects_router, tags=["objects"])

    app.add_exception_handler(GatewayError, handle_gateway_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(StarletteHTTPException, handle_http_exceptions)
    app.middleware("http")(handle_broad_exceptions)
    # added last so it wraps everything, error responses included
    app.middleware("http")(apply_cors_headers)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
