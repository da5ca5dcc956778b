"""Derive the object key a request refers to."""

from typing import Optional
from urllib.parse import unquote

from object_gateway.errors import InvalidRequest

# Path keys that name an endpoint instead of an object
LIST_KEY = "list"
MULTIPART_KEY = "multipart"


def key_from_path(raw_path: str) -> str:
    """
    Turn a raw request path into an object key.

    The leading slash is stripped and the remainder is URL-decoded exactly once,
    so ``/reports%2F2024.csv`` and ``/reports/2024.csv`` name the same object.

    :param raw_path: the undecoded request path, e.g. ``/some%20file.txt``.
    """
    return unquote(strip_leading_slash(raw_path))


def strip_leading_slash(path: str) -> str:
    """Drop one leading slash; any further slashes belong to the key."""
    if path.startswith("/"):
        return path[1:]
    return path


def resolve_object_key(
    path_key: Optional[str],
    name_field: Optional[str] = None,
    filename: Optional[str] = None,
) -> str:
    """
    Pick the storage key for a write.

    The explicit destination name wins over the uploaded file's own name, which
    wins over the key in the URL path. The first non-empty candidate is used.

    :param path_key: the key decoded from the URL path.
    :param name_field: the ``name`` form field, if the client sent one.
    :param filename: the intrinsic file name of the uploaded part.
    :raises InvalidRequest: when every candidate is empty.
    """
    for candidate in (name_field, filename, path_key):
        if candidate:
            return candidate
    raise InvalidRequest("Unable to determine an object key for the upload")
