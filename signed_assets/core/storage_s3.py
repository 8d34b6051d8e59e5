from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import boto3
from botocore.config import Config


class StorageS3Client:
    def __init__(self, *, access_key: str, secret_key: str, region: str, endpoint_url: Optional[str] = None, public_base_url: Optional[str] = None):
        # SigV4 query signing so presigned URLs carry the X-Amz-* parameter set
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=Config(signature_version="s3v4"),
        )
        self._public = urlsplit(public_base_url) if public_base_url else None

    def _rewrite_presigned_url(self, url: str) -> str:
        """Serve a presigned URL from the public origin (e.g. a CDN in front of the bucket).

        Only scheme and host change; path and the signed query stay as signed.
        """
        if self._public is None:
            return url
        signed = urlsplit(url)
        return urlunsplit((self._public.scheme, self._public.netloc, signed.path, signed.query, signed.fragment))

    def presign_get(self, *, bucket: str, key: str, expires_seconds: int) -> str:
        url = self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=int(expires_seconds),
        )
        return self._rewrite_presigned_url(url)
