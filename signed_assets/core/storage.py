from typing import Callable, Optional, Protocol

from signed_assets.core.models import StorageCredentials


class StorageClient(Protocol):
    def presign_get(self, *, bucket: str, key: str, expires_seconds: int) -> str:
        ...


ClientFactory = Callable[[StorageCredentials], StorageClient]


def build_storage_client(
    credentials: StorageCredentials,
    *,
    endpoint_url: Optional[str] = None,
    public_base_url: Optional[str] = None,
) -> StorageClient:
    """Return an S3-compatible storage client for one set of credentials.

    A fresh client is built per call; nothing is cached between rewrites.
    Tests pass their own factory instead of this one.
    """
    # Lazy import to avoid requiring boto3 in contexts that supply a fake factory
    from signed_assets.core.storage_s3 import StorageS3Client

    return StorageS3Client(
        access_key=credentials.access_key,
        secret_key=credentials.secret_key,
        region=credentials.region,
        endpoint_url=endpoint_url,
        public_base_url=public_base_url,
    )
