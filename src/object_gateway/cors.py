"""Fixed cross-origin headers applied to every response the gateway returns."""

from types import MappingProxyType

from fastapi import Request, status
from fastapi.responses import Response

CORS_HEADERS = MappingProxyType(
    {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, PUT, POST, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }
)


def handle_options() -> Response:
    """Answer a preflight request: no body, only the cross-origin headers."""
    return Response(status_code=status.HTTP_200_OK, headers=dict(CORS_HEADERS))


def add_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


async def apply_cors_headers(request: Request, call_next):
    """
    Short-circuit preflight requests and stamp the cross-origin headers on everything else.

    Registered as the outermost middleware so error responses produced further in
    carry the headers too.
    """
    if request.method == "OPTIONS":
        return handle_options()
    response = await call_next(request)
    return add_cors_headers(response)
