"""Rewrite asset URLs in a file (or stdin) and print the result.

Reads the same settings as the API (environment / .env). Handy for checking
a configuration against a saved page before wiring it into the renderer:

    S3_BUCKET=... S3_REGION=... CDN_HOST=assets.example.com \
        python scripts/rewrite_file.py page.html > page.signed.html
"""

import argparse
import logging
import sys

from signed_assets.core.config import get_settings
from signed_assets.core.rewrite import AssetURLRewriter
from signed_assets.core.storage import build_storage_client

LOG = logging.getLogger("rewrite_file")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", nargs="?", help="file to rewrite; stdin when omitted")
    parser.add_argument("--url", action="store_true", help="treat the input as a single URL value")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), stream=sys.stderr)

    config = settings.rewrite_config()
    if not config.is_active:
        LOG.warning("Rewriting disabled, missing: %s", ", ".join(config.missing_fields()))

    def client_factory(credentials):
        return build_storage_client(
            credentials,
            endpoint_url=settings.S3_ENDPOINT,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
        )

    rewriter = AssetURLRewriter(config, client_factory=client_factory)

    if args.path:
        with open(args.path, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    if args.url:
        sys.stdout.write(rewriter.rewrite_url(text.strip()) + "\n")
    else:
        sys.stdout.write(rewriter.rewrite_content(text))
    return 0


if __name__ == "__main__":
    sys.exit(main())
