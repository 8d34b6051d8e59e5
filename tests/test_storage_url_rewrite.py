from urllib.parse import urlsplit

from signed_assets.core.detector import is_signed
from signed_assets.core.models import StorageCredentials
from signed_assets.core.storage import build_storage_client
from signed_assets.core.storage_s3 import StorageS3Client


SIGNED_ON_STORAGE = (
    "https://bucket-test.s3.ap-southeast-1.amazonaws.com/photo.jpg"
    "?X-Amz-Algorithm=AWS4-HMAC-SHA256"
    "&X-Amz-Credential=AKIDEXAMPLE%2F20260101%2Fap-southeast-1%2Fs3%2Faws4_request"
    "&X-Amz-Date=20260101T000000Z&X-Amz-Expires=3600"
    "&X-Amz-SignedHeaders=host&X-Amz-Signature=abc123"
)


def test_public_host_swap_keeps_signature_markers():
    client = StorageS3Client(access_key="a", secret_key="b", region="ap-southeast-1", public_base_url="https://cdn.example.com")

    out = client._rewrite_presigned_url(SIGNED_ON_STORAGE)

    assert out.startswith("https://cdn.example.com/photo.jpg?")
    assert out.split("?", 1)[1] == SIGNED_ON_STORAGE.split("?", 1)[1]
    assert is_signed(out)


def test_no_public_base_url_leaves_presigned_url_alone():
    client = StorageS3Client(access_key="a", secret_key="b", region="ap-southeast-1")
    assert client._rewrite_presigned_url(SIGNED_ON_STORAGE) == SIGNED_ON_STORAGE


def test_presign_get_through_public_base_url_is_still_signed():
    client = build_storage_client(
        StorageCredentials(access_key="AKIDEXAMPLE", secret_key="secret", region="ap-southeast-1", bucket="bucket-test"),
        public_base_url="https://cdn.example.com",
    )
    url = client.presign_get(bucket="bucket-test", key="2024/photo.jpg", expires_seconds=600)
    parts = urlsplit(url)
    assert parts.netloc == "cdn.example.com"
    assert parts.path.endswith("/2024/photo.jpg")
    assert "X-Amz-Expires=600" in parts.query
    assert is_signed(url)


def test_presign_get_against_custom_endpoint():
    client = build_storage_client(
        StorageCredentials(access_key="minio", secret_key="minio123", region="us-east-1", bucket="media"),
        endpoint_url="http://minio:9000",
    )
    url = client.presign_get(bucket="media", key="a b.png", expires_seconds=60)
    parts = urlsplit(url)
    assert parts.netloc.endswith("minio:9000")
    assert parts.path.endswith("/a%20b.png")
    assert is_signed(url)
