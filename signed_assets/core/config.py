from functools import lru_cache

from pydantic_settings import BaseSettings

from signed_assets.core.models import DEFAULT_TTL_SECONDS, RewriteConfig, StorageCredentials


class Settings(BaseSettings):
    APP_NAME: str = "signed-assets"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Object storage
    S3_BUCKET: str = ""
    S3_REGION: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_ENDPOINT: str | None = None
    # When set, presigned URLs are served from this origin instead of the storage host
    S3_PUBLIC_BASE_URL: str | None = None

    # Asset references to rewrite; at least one host is needed
    CDN_HOST: str | None = None
    STORAGE_HOST: str | None = None
    ASSET_PATH_PREFIX: str = "/wp-content/uploads/"
    # Keep ASSET_PATH_PREFIX in the object key when the bucket layout mirrors it
    ASSET_KEY_KEEP_PREFIX: bool = False
    SIGNED_URL_TTL_SECONDS: int = DEFAULT_TTL_SECONDS

    class Config:
        env_file = ".env"
        extra = "ignore"

    def storage_credentials(self) -> StorageCredentials:
        return StorageCredentials(
            access_key=self.S3_ACCESS_KEY,
            secret_key=self.S3_SECRET_KEY,
            region=self.S3_REGION,
            bucket=self.S3_BUCKET,
        )

    def rewrite_config(self) -> RewriteConfig:
        return RewriteConfig(
            cdn_host=self.CDN_HOST,
            storage_host=self.STORAGE_HOST,
            asset_path_prefix=self.ASSET_PATH_PREFIX,
            credentials=self.storage_credentials(),
            ttl=self.SIGNED_URL_TTL_SECONDS,
            keep_prefix_in_key=self.ASSET_KEY_KEEP_PREFIX,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
