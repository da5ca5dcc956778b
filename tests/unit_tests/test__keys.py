import pytest

from object_gateway.errors import InvalidRequest
from object_gateway.keys import key_from_path, resolve_object_key, strip_leading_slash


@pytest.mark.parametrize(
    "raw_path, expected_key",
    [
        ("/file.txt", "file.txt"),
        ("/some/nested/file.txt", "some/nested/file.txt"),
        ("/with%20space.txt", "with space.txt"),
        ("/reports%2F2024.csv", "reports/2024.csv"),
        ("/list", "list"),
        ("/", ""),
    ],
)
def test__key_from_path(raw_path: str, expected_key: str):
    assert key_from_path(raw_path) == expected_key


def test__key_from_path__decodes_only_once():
    assert key_from_path("/100%2525.txt") == "100%25.txt"


@pytest.mark.parametrize(
    "decoded_path, expected_key",
    [
        ("/a?b.txt", "a?b.txt"),
        ("/notes#1.txt", "notes#1.txt"),
        ("//lead.txt", "/lead.txt"),
        ("/100%25.txt", "100%25.txt"),
    ],
)
def test__strip_leading_slash__removes_one_slash_and_never_decodes(decoded_path: str, expected_key: str):
    assert strip_leading_slash(decoded_path) == expected_key


def test__resolve_object_key__name_field_wins():
    assert resolve_object_key("baz.txt", name_field="foo.txt", filename="bar.txt") == "foo.txt"


def test__resolve_object_key__filename_beats_path():
    assert resolve_object_key("baz.txt", name_field=None, filename="bar.txt") == "bar.txt"


def test__resolve_object_key__empty_candidates_are_skipped():
    assert resolve_object_key("baz.txt", name_field="", filename="") == "baz.txt"


def test__resolve_object_key__falls_back_to_path():
    assert resolve_object_key("baz.txt") == "baz.txt"


def test__resolve_object_key__no_candidates():
    with pytest.raises(InvalidRequest):
        resolve_object_key("", name_field=None, filename=None)
