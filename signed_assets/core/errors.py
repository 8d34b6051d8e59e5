"""Failure taxonomy for the asset URL rewrite pipeline.

None of these are fatal to a caller: the issuer turns them into failed
``SignResult`` values and the pipeline resolves every one of them to
"leave this reference unchanged".
"""


class RewriteError(Exception):
    """Base class for rewrite failures."""

    code = "REWRITE_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" if self.message else self.code


class ConfigMissing(RewriteError):
    """Required domain, prefix, bucket, region or ttl is absent."""

    code = "CONFIG_MISSING"


class CredentialsMissing(RewriteError):
    """Access key or secret key is empty."""

    code = "CREDENTIALS_MISSING"


class SigningFailed(RewriteError):
    """The storage client raised while presigning, or returned garbage."""

    code = "SIGNING_FAILED"


class MalformedURL(RewriteError):
    """A URL could not be parsed into scheme, host and path."""

    code = "MALFORMED_URL"
