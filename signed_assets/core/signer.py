"""Signature issuer: turns an object key into a presigned GET URL.

``sign`` always returns a :class:`SignResult`. Missing settings, SDK errors
and odd return values all come back as failed results so a single bad asset
can never break the page that references it.
"""
import logging
from typing import Optional

from signed_assets.core.errors import ConfigMissing, CredentialsMissing, SigningFailed
from signed_assets.core.models import SignRequest, SignResult, StorageCredentials
from signed_assets.core.query import parse_url
from signed_assets.core.redaction import redact_url
from signed_assets.core.storage import ClientFactory, build_storage_client

LOG = logging.getLogger(__name__)


def sign(
    credentials: StorageCredentials,
    object_key: str,
    ttl: int,
    *,
    client_factory: Optional[ClientFactory] = None,
) -> SignResult:
    """Presign a GET of ``object_key`` valid for ``ttl`` seconds.

    Args:
        credentials: Resolved bucket, region and key pair.
        object_key: Storage key; a leading ``/`` is always stripped.
        ttl: Validity in seconds.
        client_factory: Builds a storage client from the credentials.
            Defaults to the boto3-backed client.

    Returns:
        A successful result holding an absolute signed URL, or a failed
        result holding a ConfigMissing, CredentialsMissing or SigningFailed.
    """
    if not credentials.access_key or not credentials.secret_key:
        return SignResult.failure(CredentialsMissing("access key or secret key is empty"))
    if not credentials.bucket or not credentials.region:
        return SignResult.failure(ConfigMissing("bucket or region is empty"))
    try:
        expires = int(ttl)
    except (TypeError, ValueError):
        expires = 0
    if expires <= 0:
        return SignResult.failure(ConfigMissing(f"ttl must be positive, got {ttl!r}"))

    key = (object_key or "").lstrip("/")
    if not key:
        return SignResult.failure(SigningFailed("empty object key"))

    factory = client_factory or build_storage_client
    try:
        client = factory(credentials)
        url = client.presign_get(bucket=credentials.bucket, key=key, expires_seconds=expires)
    except Exception as e:
        LOG.warning("Presigning %s/%s failed: %s: %s", credentials.bucket, key, e.__class__.__name__, e)
        return SignResult.failure(SigningFailed(f"{e.__class__.__name__}: {e}"))

    try:
        parse_url(url)
    except Exception:
        LOG.warning("Storage client returned an unusable URL for %s/%s: %s", credentials.bucket, key, redact_url(str(url)))
        return SignResult.failure(SigningFailed("storage client returned an invalid URL"))

    LOG.debug("Signed %s/%s -> %s", credentials.bucket, key, redact_url(url))
    return SignResult.success(url)


def issue(
    request: SignRequest,
    credentials: StorageCredentials,
    *,
    client_factory: Optional[ClientFactory] = None,
) -> SignResult:
    return sign(credentials, request.object_key, request.ttl, client_factory=client_factory)
