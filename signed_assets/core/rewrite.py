"""Rewrite pipeline: replace asset references with signed URLs.

Every failure is local to one reference and resolves to leaving that
reference exactly as it was; nothing here raises into the renderer.
"""
import enum
import logging
from typing import Any, List, Optional, Sequence

from signed_assets.core.detector import is_signed
from signed_assets.core.matcher import AssetURLMatcher
from signed_assets.core.models import AssetMatch, RewriteConfig, StorageCredentials
from signed_assets.core.query import reconcile
from signed_assets.core.redaction import redact_url
from signed_assets.core.signer import sign
from signed_assets.core.storage import ClientFactory, StorageClient, build_storage_client

LOG = logging.getLogger(__name__)


class RenderHook(str, enum.Enum):
    """Render points of the host publishing system that feed the rewriter."""

    CONTENT = "the_content"
    POST_THUMBNAIL_HTML = "post_thumbnail_html"
    WIDGET_TEXT = "widget_text"
    AVATAR = "get_avatar"
    ATTACHMENT_URL = "wp_get_attachment_url"
    ATTACHMENT_IMAGE_SRC = "wp_get_attachment_image_src"


class AssetURLRewriter:
    """Signs every matching asset URL for one configuration.

    The storage client is built once and reused for every reference; one
    rewriter per request or call is the expected usage.
    """

    def __init__(self, config: RewriteConfig, *, client_factory: Optional[ClientFactory] = None):
        self.config = config
        self.client_factory = client_factory or build_storage_client
        self._client: Optional[StorageClient] = None
        self.matcher: Optional[AssetURLMatcher] = None
        missing = config.missing_fields()
        if missing:
            LOG.debug("Asset URL rewriting disabled, missing: %s", ", ".join(missing))
        else:
            self.matcher = AssetURLMatcher(
                config.hosts,
                config.prefix,
                keep_prefix_in_key=config.keep_prefix_in_key,
            )

    def _shared_client(self, credentials: StorageCredentials) -> StorageClient:
        if self._client is None:
            self._client = self.client_factory(credentials)
        return self._client

    @property
    def enabled(self) -> bool:
        return self.matcher is not None

    def _replacement(self, match: AssetMatch) -> str:
        if is_signed(match.url):
            return match.url

        key = self.matcher.object_key(match.reference)
        result = sign(self.config.credentials, key, self.config.ttl, client_factory=self._shared_client)
        if not result.ok:
            LOG.warning("Leaving %s unsigned: %s", redact_url(match.url), result.error)
            return match.url

        try:
            return reconcile(result.signed_url, match.url)
        except Exception:
            LOG.exception("Query reconciliation failed for %s", redact_url(match.url))
            return match.url

    def rewrite_content(self, text: str) -> str:
        """Replace every matching reference in ``text`` in a single pass."""
        if not self.enabled or not text:
            return text

        pieces: List[str] = []
        last = 0
        count = 0
        for match in self.matcher.iter_matches(text):
            pieces.append(text[last:match.start])
            replacement = self._replacement(match)
            if replacement != match.url:
                count += 1
            pieces.append(replacement)
            last = match.end
        if not pieces:
            return text
        pieces.append(text[last:])
        LOG.debug("Rewrote %d asset reference(s)", count)
        return "".join(pieces)

    def rewrite_url(self, url: str) -> str:
        """Rewrite a single URL value, e.g. an attachment URL field."""
        if not self.enabled or not url:
            return url
        match = self.matcher.match_url(url)
        if match is None:
            return url
        return self._replacement(match)

    def rewrite_image_src(self, image: Optional[Sequence[Any]]) -> Optional[Sequence[Any]]:
        """Rewrite the URL slot of an ``[url, width, height, ...]`` record.

        The record is returned as the same sequence type; entries other than
        the first are left alone.
        """
        if not image:
            return image
        first = image[0]
        if not first or not isinstance(first, str):
            return image
        rewritten = self.rewrite_url(first)
        if rewritten == first:
            return image
        items = list(image)
        items[0] = rewritten
        return tuple(items) if isinstance(image, tuple) else items

    def rewrite_for_hook(self, hook: RenderHook, value: Any) -> Any:
        if hook == RenderHook.ATTACHMENT_IMAGE_SRC:
            return self.rewrite_image_src(value)
        return self.rewrite_content(value)


def rewrite_content(text: str, config: RewriteConfig, *, client_factory: Optional[ClientFactory] = None) -> str:
    return AssetURLRewriter(config, client_factory=client_factory).rewrite_content(text)


def rewrite_url(url: str, config: RewriteConfig, *, client_factory: Optional[ClientFactory] = None) -> str:
    return AssetURLRewriter(config, client_factory=client_factory).rewrite_url(url)


def rewrite_image_src(
    image: Optional[Sequence[Any]],
    config: RewriteConfig,
    *,
    client_factory: Optional[ClientFactory] = None,
) -> Optional[Sequence[Any]]:
    return AssetURLRewriter(config, client_factory=client_factory).rewrite_image_src(image)
