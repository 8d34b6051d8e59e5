from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import urlsplit

from signed_assets.core.errors import RewriteError

DEFAULT_TTL_SECONDS = 3600


def normalize_host(value: Optional[str]) -> str:
    """Return the lower-cased host of a bare host name or a full origin.

    ``"https://Assets.Example.com/"`` and ``"assets.example.com"`` both give
    ``"assets.example.com"``.
    """
    if not value:
        return ""
    value = value.strip()
    if "://" in value:
        value = urlsplit(value).netloc
    return value.strip("/").lower()


def normalize_prefix(value: Optional[str]) -> str:
    if not value:
        return ""
    value = value.strip()
    if not value.startswith("/"):
        value = "/" + value
    return value


@dataclass(frozen=True)
class StorageCredentials:
    access_key: str = ""
    secret_key: str = ""
    region: str = ""
    bucket: str = ""

    def __repr__(self) -> str:
        # key material stays out of reprs and therefore out of logs
        return (
            f"StorageCredentials(access_key={'set' if self.access_key else 'empty'}, "
            f"secret_key={'set' if self.secret_key else 'empty'}, "
            f"region={self.region!r}, bucket={self.bucket!r})"
        )


@dataclass(frozen=True)
class AssetReference:
    """Decomposed form of a matched asset URL."""

    scheme: str
    host: str
    path: str
    raw_query: str = ""
    fragment: str = ""


@dataclass(frozen=True)
class AssetMatch:
    url: str
    start: int
    end: int
    reference: AssetReference


@dataclass(frozen=True)
class SignRequest:
    object_key: str
    ttl: int = DEFAULT_TTL_SECONDS


@dataclass(frozen=True)
class SignResult:
    """Outcome of one signing attempt: a signed URL or an error, never both."""

    signed_url: Optional[str] = None
    error: Optional[RewriteError] = None

    @classmethod
    def success(cls, signed_url: str) -> "SignResult":
        return cls(signed_url=signed_url)

    @classmethod
    def failure(cls, error: RewriteError) -> "SignResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.signed_url)


@dataclass(frozen=True)
class RewriteConfig:
    """Everything one rewrite call needs; built by the caller per invocation."""

    cdn_host: Optional[str] = None
    storage_host: Optional[str] = None
    asset_path_prefix: str = ""
    credentials: StorageCredentials = field(default_factory=StorageCredentials)
    ttl: int = DEFAULT_TTL_SECONDS
    keep_prefix_in_key: bool = False

    @property
    def hosts(self) -> Tuple[str, ...]:
        out = []
        for value in (self.cdn_host, self.storage_host):
            host = normalize_host(value)
            if host and host not in out:
                out.append(host)
        return tuple(out)

    @property
    def prefix(self) -> str:
        return normalize_prefix(self.asset_path_prefix)

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of fields whose absence turns the whole rewrite into a no-op."""
        missing = []
        if not self.hosts:
            missing.append("cdn_host/storage_host")
        if not self.prefix:
            missing.append("asset_path_prefix")
        if not self.ttl or self.ttl <= 0:
            missing.append("ttl")
        return tuple(missing)

    @property
    def is_active(self) -> bool:
        return not self.missing_fields()
