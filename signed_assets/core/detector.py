from signed_assets.core.errors import MalformedURL
from signed_assets.core.query import parse_query, parse_url

# Query keys every SigV4 presigned URL carries.
SIGNATURE_PARAMS = (
    "X-Amz-Algorithm",
    "X-Amz-Credential",
    "X-Amz-Date",
    "X-Amz-Expires",
    "X-Amz-SignedHeaders",
    "X-Amz-Signature",
)

_SIGNATURE_KEYS = frozenset(k.lower() for k in SIGNATURE_PARAMS)


def is_signed(url: str) -> bool:
    """True only when all six signature parameters are already on the URL.

    Keeps a second rewrite pass from signing its own output again.
    """
    try:
        parsed = parse_url(url)
    except MalformedURL:
        return False
    if not parsed.query:
        return False
    present = {key.lower() for key in parse_query(parsed.query)}
    return _SIGNATURE_KEYS <= present
