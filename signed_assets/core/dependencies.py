from functools import partial

from fastapi import Depends

from signed_assets.core.config import Settings, get_settings
from signed_assets.core.rewrite import AssetURLRewriter
from signed_assets.core.storage import ClientFactory, build_storage_client


def get_client_factory(settings: Settings = Depends(get_settings)) -> ClientFactory:
    """Factory dependency that returns how storage clients get built.

    Tests may override this dependency to provide a fake client.
    """
    return partial(
        build_storage_client,
        endpoint_url=settings.S3_ENDPOINT,
        public_base_url=settings.S3_PUBLIC_BASE_URL,
    )


def get_rewriter(
    settings: Settings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> AssetURLRewriter:
    """A rewriter built fresh for each request from the current settings."""
    return AssetURLRewriter(settings.rewrite_config(), client_factory=client_factory)
