from fastapi import status
from fastapi.testclient import TestClient

# S3 rejects non-final parts under 5 MiB on completion
FIRST_PART = b"a" * (5 * 1024 * 1024)
SECOND_PART = b"the tail end"
TEST_KEY = "videos/big.bin"


def _initiate(client: TestClient, key: str = TEST_KEY) -> str:
    response = client.post("/multipart", json={"key": key})
    assert response.status_code == status.HTTP_200_OK
    return response.json()["uploadId"]


def _upload_part(client: TestClient, upload_id: str, part_number: int, content: bytes, key: str = TEST_KEY):
    return client.post(
        "/multipart",
        params={"key": key, "uploadId": upload_id, "partNumber": part_number},
        content=content,
    )


def test__multipart_upload__happy_path(client: TestClient):
    upload_id = _initiate(client)
    assert upload_id

    first = _upload_part(client, upload_id, 1, FIRST_PART)
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["partNumber"] == 1
    etag1 = first.json()["etag"]

    second = _upload_part(client, upload_id, 2, SECOND_PART)
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["partNumber"] == 2
    etag2 = second.json()["etag"]

    response = client.post(
        "/multipart",
        json={
            "key": TEST_KEY,
            "uploadId": upload_id,
            "parts": [{"partNumber": 1, "etag": etag1}, {"partNumber": 2, "etag": etag2}],
        },
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["key"] == TEST_KEY
    assert response.json()["etag"]

    fetched = client.get(f"/{TEST_KEY}")
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.content == FIRST_PART + SECOND_PART


def test__multipart_upload__single_part(client: TestClient):
    upload_id = _initiate(client, key="small.bin")
    etag = _upload_part(client, upload_id, 1, b"only part", key="small.bin").json()["etag"]

    response = client.post(
        "/multipart",
        json={"key": "small.bin", "uploadId": upload_id, "parts": [{"partNumber": 1, "etag": etag}]},
    )

    assert response.status_code == status.HTTP_200_OK
    assert client.get("/small.bin").content == b"only part"


def test__part_upload_without_body_is_rejected(client: TestClient):
    upload_id = _initiate(client)

    response = client.post("/multipart", json={"key": TEST_KEY, "uploadId": upload_id, "partNumber": 1})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__part_upload_with_empty_body_is_rejected(client: TestClient):
    upload_id = _initiate(client)

    response = _upload_part(client, upload_id, 1, b"")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__unrecognized_shape_is_rejected(client: TestClient):
    response = client.post("/multipart", json={"key": TEST_KEY, "uploadId": "abc"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Invalid multipart upload request"


def test__malformed_json_is_rejected(client: TestClient):
    response = client.post("/multipart", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__missing_key_is_rejected(client: TestClient):
    response = client.post("/multipart", json={})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__part_for_unknown_session_is_an_upstream_error(client: TestClient):
    response = _upload_part(client, "no-such-upload", 1, b"orphan")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.text.startswith("Error: ")

