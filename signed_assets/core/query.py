"""Merge the query of a freshly signed URL with the query of the URL it replaces.

The signed URL is authoritative for everything up to the query: it is the
one the storage service will actually validate. Caller supplied parameters
(resize hints, cache busters and the like) are carried over unless their key
collides with one the signed URL already has.

Query segments are kept in their raw, already-encoded form. Keys are only
decoded to compare them, so the signature values botocore produced are
emitted byte-for-byte.
"""
import logging
import re
from typing import Dict, NamedTuple
from urllib.parse import unquote_plus, urlsplit, urlunsplit

from signed_assets.core.errors import MalformedURL
from signed_assets.core.redaction import redact_url

LOG = logging.getLogger(__name__)

# &amp; &#038; &#38; &#x26; left behind by HTML escaping upstream
_ENTITY_AMP_RE = re.compile(r"&(?:amp|#0*38|#x0*26);", re.IGNORECASE)
# "&amp;" whose ";" got percent-encoded, or a separator that is just "%3B"
_ENCODED_SEMICOLON_RE = re.compile(r"(?:^|&)(?:amp)?%3B", re.IGNORECASE)


class ParsedURL(NamedTuple):
    scheme: str
    netloc: str
    path: str
    query: str
    fragment: str


QueryParams = Dict[str, str]


def parse_url(url: str) -> ParsedURL:
    """Split an absolute http(s) URL; raise MalformedURL for anything else."""
    if not url:
        raise MalformedURL("empty URL")
    try:
        # numeric entities contain "#" and would otherwise start a fragment
        parts = urlsplit(_ENTITY_AMP_RE.sub("&", url.strip()))
    except ValueError as e:
        raise MalformedURL(f"{redact_url(url)!r}: {e}") from e
    if parts.scheme.lower() not in ("http", "https"):
        raise MalformedURL(f"{redact_url(url)!r}: not an http(s) URL")
    if not parts.netloc:
        raise MalformedURL(f"{redact_url(url)!r}: missing host")
    return ParsedURL(parts.scheme, parts.netloc, parts.path, parts.query, parts.fragment)


def unescape_amp(text: str) -> str:
    """Turn HTML-escaped ampersands back into a literal ``&``."""
    return _ENTITY_AMP_RE.sub("&", text)


def normalize_query(raw: str) -> str:
    """Undo HTML escaping of separators and drop encoded-semicolon debris."""
    if not raw:
        return ""
    query = unescape_amp(raw)
    query = _ENCODED_SEMICOLON_RE.sub("&", query)
    return "&".join(segment for segment in query.split("&") if segment)


def parse_query(raw: str) -> QueryParams:
    """Map decoded key -> raw ``key=value`` segment, in first-seen order.

    A repeated key keeps the position of its first occurrence and the value
    of its last one.
    """
    params: QueryParams = {}
    for segment in normalize_query(raw).split("&"):
        if not segment:
            continue
        raw_key = segment.split("=", 1)[0]
        # a segment with no key ("=x") is kept under its raw text
        key = unquote_plus(raw_key) or segment
        params[key] = segment
    return params


def merge_params(signed: QueryParams, original: QueryParams) -> QueryParams:
    """Signed parameters first, then original ones that do not collide.

    Collisions are checked case-insensitively: an original ``x-amz-expires``
    must not sit next to the signed ``X-Amz-Expires``.
    """
    merged = dict(signed)
    taken = {key.lower() for key in signed}
    for key, segment in original.items():
        if key.lower() in taken:
            continue
        merged[key] = segment
        taken.add(key.lower())
    return merged


def build_query(params: QueryParams) -> str:
    return "&".join(params.values())


def reconcile(signed_url: str, original_url: str) -> str:
    """Return the signed URL carrying the original URL's extra query params.

    If either URL cannot be parsed the signed URL is returned untouched: it is
    usable on its own, the original's parameters are just lost.
    """
    try:
        signed = parse_url(signed_url)
        original = parse_url(original_url)
    except MalformedURL as e:
        LOG.warning("Query reconciliation skipped: %s", e)
        return signed_url

    merged = merge_params(parse_query(signed.query), parse_query(original.query))
    fragment = original.fragment or signed.fragment
    return urlunsplit((signed.scheme, signed.netloc, signed.path, build_query(merged), fragment))
