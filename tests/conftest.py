import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from object_gateway.main import create_app
from object_gateway.settings import Settings
from tests.consts import TEST_BUCKET_NAME


@pytest.fixture
def mocked_aws(monkeypatch):
    """Point boto3 at moto's in-memory S3 with a fresh test bucket."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)

    with mock_aws():
        s3_client = boto3.client("s3")
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield


@pytest.fixture
def settings(mocked_aws) -> Settings:
    return Settings(s3_bucket_name=TEST_BUCKET_NAME)


@pytest.fixture
def client(settings) -> TestClient:
    app = create_app(settings=settings)
    with TestClient(app) as client:
        yield client
