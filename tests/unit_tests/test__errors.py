from botocore.exceptions import ClientError, EndpointConnectionError
from fastapi import status

from object_gateway.errors import (
    GENERIC_ERROR_MESSAGE,
    NotFound,
    PayloadTooLarge,
    UnknownError,
    UpstreamError,
    translate_backend_error,
)


def _client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "GetObject")


def test__no_such_key_on_read_is_not_found():
    assert isinstance(translate_backend_error(_client_error("NoSuchKey"), missing_is_not_found=True), NotFound)


def test__no_such_key_elsewhere_is_upstream():
    error = translate_backend_error(_client_error("NoSuchKey", "gone"))
    assert isinstance(error, UpstreamError)
    assert error.message == "NoSuchKey: gone"
    assert error.status_code == 500


def test__connection_failure_is_upstream():
    error = translate_backend_error(EndpointConnectionError(endpoint_url="http://localhost:9000"))
    assert isinstance(error, UpstreamError)
    assert "localhost:9000" in error.message


def test__anything_else_is_unknown():
    assert isinstance(translate_backend_error(RuntimeError("odd")), UnknownError)
    assert translate_backend_error(RuntimeError()).message == GENERIC_ERROR_MESSAGE


def test__payload_too_large_uses_content_too_large_status():
    assert PayloadTooLarge.status_code == status.HTTP_413_CONTENT_TOO_LARGE == 413
