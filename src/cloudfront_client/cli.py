"""CloudFront client CLI."""

from __future__ import annotations

import argparse
import json
import os
from datetime import datetime

from cloudfront_client.client import CloudFront
from cloudfront_client.url_signing import epoch_seconds


def _parse_expires(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: {value}") from error


def _add_signing_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path")
    parser.add_argument("--expires", required=True, type=_parse_expires)
    parser.add_argument("--query", default="")
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--key-pair-id", default=None)
    parser.add_argument("--private-key", default=None, help="PEM file with the RSA signing key")
    parser.add_argument("--json", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cloudfront-client", description="CloudFront signed URL CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sign_parser = subparsers.add_parser("sign", help="Create a canned-policy signed URL")
    _add_signing_arguments(sign_parser)

    legacy_parser = subparsers.add_parser("legacy-sign", help="Create a URL in the legacy unsigned format")
    _add_signing_arguments(legacy_parser)

    return parser


def _client(args: argparse.Namespace) -> CloudFront:
    if args.private_key or os.environ.get("CLOUDFRONT_PRIVATE_KEY_PATH"):
        return CloudFront.new(
            base_url=args.base_url,
            key_pair_id=args.key_pair_id,
            private_key_path=args.private_key,
        )
    return CloudFront.key_less(
        access_key=args.key_pair_id or os.environ.get("CLOUDFRONT_KEY_PAIR_ID"),
        base_url=args.base_url,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command not in ("sign", "legacy-sign"):
        parser.print_help()
        return 1

    try:
        client = _client(args)
        if args.command == "sign":
            url = client.canned_signed_url(args.path, args.query, expires=args.expires)
        else:
            url = client.signed_url(args.path, args.query, expires=args.expires)
    except ValueError as error:
        parser.error(str(error))

    if args.json:
        print(
            json.dumps(
                {
                    "command": args.command,
                    "url": url,
                    "expires": epoch_seconds(args.expires),
                },
                sort_keys=True,
            )
        )
        return 0
    print(url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
