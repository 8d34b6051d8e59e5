"""Find asset URLs on the configured hosts inside rendered text.

A match is an absolute http(s) URL whose host is exactly one of the
configured hosts and whose path starts with the asset prefix. The URL ends
at the first whitespace, quote or angle bracket, which keeps any trailing
query string and fragment inside the match.

The pattern has no nested quantifiers, so scanning stays linear in the size
of the text.
"""
import re
from typing import Iterable, Iterator, Optional
from urllib.parse import unquote

from signed_assets.core.models import AssetMatch, AssetReference, normalize_host, normalize_prefix
from signed_assets.core.query import unescape_amp

# Characters that end a URL embedded in markup.
_STOP = r"\s\"'<>"


class AssetURLMatcher:
    def __init__(self, hosts: Iterable[str], prefix: str, *, keep_prefix_in_key: bool = False):
        unique = []
        for host in hosts:
            host = normalize_host(host)
            if host and host not in unique:
                unique.append(host)
        if not unique:
            raise ValueError("at least one host is required")
        prefix = normalize_prefix(prefix)
        if not prefix:
            raise ValueError("an asset path prefix is required")

        self.hosts = tuple(unique)
        self.prefix = prefix
        self.keep_prefix_in_key = keep_prefix_in_key
        # longest host first so an alias that is a prefix of another never shadows it
        alternation = "|".join(re.escape(h) for h in sorted(self.hosts, key=len, reverse=True))
        self._pattern = re.compile(
            r"(?P<scheme>https?)://"
            r"(?P<host>" + alternation + r")"
            r"(?P<path>" + re.escape(prefix) + r"[^" + _STOP + r"?#]+)"
            r"(?:\?(?P<query>[^" + _STOP + r"#]*))?"
            r"(?:#(?P<fragment>[^" + _STOP + r"]*))?",
            re.IGNORECASE,
        )

    def _to_match(self, m: "re.Match[str]") -> AssetMatch:
        reference = AssetReference(
            scheme=m.group("scheme").lower(),
            host=m.group("host").lower(),
            path=m.group("path"),
            raw_query=m.group("query") or "",
            fragment=m.group("fragment") or "",
        )
        return AssetMatch(url=m.group(0), start=m.start(), end=m.end(), reference=reference)

    def iter_matches(self, text: str) -> Iterator[AssetMatch]:
        """Lazily yield non-overlapping matches in order of appearance."""
        if not text:
            return
        for m in self._pattern.finditer(text):
            yield self._to_match(m)

    def match_url(self, url: str) -> Optional[AssetMatch]:
        """Apply the same predicate to a whole URL value, without scanning."""
        if not url:
            return None
        m = self._pattern.fullmatch(url)
        if m is None:
            return None
        return self._to_match(m)

    def object_key(self, reference: AssetReference) -> str:
        """Storage key for a matched reference.

        HTML-escaped ampersands are undone, then the path is percent-decoded
        (the storage SDK encodes it again) and made relative. The asset prefix is dropped unless the bucket layout
        mirrors it (``keep_prefix_in_key``).
        """
        path = unescape_amp(reference.path)
        if not self.keep_prefix_in_key and path.lower().startswith(self.prefix.lower()):
            path = path[len(self.prefix):]
        return unquote(path).lstrip("/")
