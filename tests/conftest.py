"""Pytest configuration and fixtures for testing."""
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from signed_assets.core.config import Settings, get_settings
from signed_assets.core.dependencies import get_client_factory
from signed_assets.core.models import RewriteConfig, StorageCredentials
from signed_assets.main import app


BUCKET = "bucket-test"
REGION = "ap-southeast-1"
CDN_HOST = "cdn.example.com"
STORAGE_HOST = f"{BUCKET}.s3.{REGION}.amazonaws.com"
PREFIX = "/assets/uploads/"


class FakeStorageClient:
    """Deterministic stand-in for StorageS3Client that records its calls."""

    def __init__(self, host: str = STORAGE_HOST):
        self.host = host
        self.calls = []

    def presign_get(self, *, bucket, key, expires_seconds):
        self.calls.append({"bucket": bucket, "key": key, "expires_seconds": expires_seconds})
        return (
            f"https://{self.host}/{quote(key)}"
            "?X-Amz-Algorithm=AWS4-HMAC-SHA256"
            "&X-Amz-Credential=AKIDEXAMPLE%2F20260101%2Fap-southeast-1%2Fs3%2Faws4_request"
            "&X-Amz-Date=20260101T000000Z"
            f"&X-Amz-Expires={expires_seconds}"
            "&X-Amz-SignedHeaders=host"
            "&X-Amz-Signature=0123456789abcdef0123456789abcdef"
        )


class BrokenStorageClient:
    def presign_get(self, *, bucket, key, expires_seconds):
        raise RuntimeError("storage unavailable")


@pytest.fixture
def credentials():
    return StorageCredentials(
        access_key="AKIDEXAMPLE",
        secret_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        region=REGION,
        bucket=BUCKET,
    )


@pytest.fixture
def config(credentials):
    return RewriteConfig(
        cdn_host=CDN_HOST,
        storage_host=STORAGE_HOST,
        asset_path_prefix=PREFIX,
        credentials=credentials,
        ttl=3600,
    )


@pytest.fixture
def fake_storage():
    return FakeStorageClient()


@pytest.fixture
def fake_factory(fake_storage):
    return lambda credentials: fake_storage


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        S3_BUCKET=BUCKET,
        S3_REGION=REGION,
        S3_ACCESS_KEY="AKIDEXAMPLE",
        S3_SECRET_KEY="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        CDN_HOST=CDN_HOST,
        STORAGE_HOST=STORAGE_HOST,
        ASSET_PATH_PREFIX=PREFIX,
    )


@pytest.fixture
def client(settings, fake_factory):
    """Create a test client with fixed settings and a fake storage client."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_client_factory] = lambda: fake_factory

    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client

    app.dependency_overrides.clear()
