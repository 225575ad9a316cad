"""CloudFront client: signed URLs and distribution management."""

from __future__ import annotations

import dataclasses
import logging
import os
import time
import urllib.error
import urllib.request
from datetime import datetime
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from cloudfront_client.encoding import API_VERSION, marshal_distribution_config
from cloudfront_client.errors import CloudFrontError, parse_error_response
from cloudfront_client.keys import load_private_key_file, validate_private_key
from cloudfront_client.request_signing import RequestSigner, SigV4Signer
from cloudfront_client.types import (
    CreateDistributionResult,
    DistributionConfig,
    FetchResponse,
    SignerConfig,
)
from cloudfront_client.url_signing import canned_signed_url, legacy_signed_url

logger = logging.getLogger(__name__)

SERVICE_NAME = "cloudfront"
DEFAULT_ENDPOINT = f"https://{SERVICE_NAME}.amazonaws.com"

Fetcher = Callable[[str, str, dict[str, str], bytes, Optional[float]], FetchResponse]


def _resolve_endpoint(explicit: str | None) -> str:
    return (explicit or os.environ.get("CLOUDFRONT_ENDPOINT") or DEFAULT_ENDPOINT).rstrip("/")


def _require(value: str | None, env_name: str, label: str) -> str:
    resolved = value or os.environ.get(env_name)
    if not resolved:
        raise ValueError(f"{label} is required. Pass it explicitly or set {env_name}.")
    return resolved


def _env_request_signer() -> RequestSigner | None:
    access_key = os.environ.get("AWS_ACCESS_KEY_ID")
    secret_key = os.environ.get("AWS_SECRET_ACCESS_KEY")
    if not access_key or not secret_key:
        return None
    return SigV4Signer(access_key, secret_key, session_token=os.environ.get("AWS_SESSION_TOKEN"))


def urllib_fetcher(
    url: str,
    method: str,
    headers: dict[str, str],
    body: bytes,
    timeout: float | None,
) -> FetchResponse:
    request = urllib.request.Request(url, method=method, headers=headers, data=body)
    kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        with urllib.request.urlopen(request, **kwargs) as response:
            return FetchResponse(
                status=response.status,
                reason=response.reason or "",
                headers=dict(response.headers.items()),
                body=response.read(),
            )
    except urllib.error.HTTPError as error:
        try:
            return FetchResponse(
                status=error.code,
                reason=str(error.reason or ""),
                headers=dict(error.headers.items()) if error.headers else {},
                body=error.read(),
            )
        finally:
            error.close()


class CloudFront:
    """Holds one immutable :class:`SignerConfig` and an optional request signer.

    Signing methods read only the config, so one instance can be shared
    between threads.
    """

    def __init__(
        self,
        config: SignerConfig,
        *,
        request_signer: RequestSigner | None = None,
        endpoint: str | None = None,
        fetcher: Fetcher | None = None,
    ):
        if not config.key_pair_id:
            raise ValueError("key_pair_id is required")
        if config.private_key is not None:
            validate_private_key(config.private_key)

        self.config = config
        self.endpoint = _resolve_endpoint(endpoint)
        self._request_signer = request_signer
        self._fetcher = fetcher or urllib_fetcher

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def key_pair_id(self) -> str:
        return self.config.key_pair_id

    @classmethod
    def new(
        cls,
        *,
        base_url: str | None = None,
        private_key: RSAPrivateKey | None = None,
        key_pair_id: str | None = None,
        private_key_path: str | None = None,
        request_signer: RequestSigner | None = None,
        endpoint: str | None = None,
        fetcher: Fetcher | None = None,
    ) -> "CloudFront":
        """Client that signs URLs with an RSA key registered under ``key_pair_id``."""
        if private_key is None:
            path = _require(private_key_path, "CLOUDFRONT_PRIVATE_KEY_PATH", "Private key")
            private_key = load_private_key_file(path)

        config = SignerConfig(
            base_url=_require(base_url, "CLOUDFRONT_BASE_URL", "Base URL"),
            key_pair_id=_require(key_pair_id, "CLOUDFRONT_KEY_PAIR_ID", "Key-pair id"),
            private_key=private_key,
        )
        return cls(config, request_signer=request_signer, endpoint=endpoint, fetcher=fetcher)

    @classmethod
    def key_less(
        cls,
        *,
        access_key: str | None = None,
        secret_key: str | None = None,
        base_url: str | None = None,
        session_token: str | None = None,
        endpoint: str | None = None,
        fetcher: Fetcher | None = None,
    ) -> "CloudFront":
        """Client without a signing key.

        URLs it produces carry an unsigned digest and the access key as
        ``Key-Pair-Id``; CloudFront will reject them for private content.
        """
        access = _require(access_key, "AWS_ACCESS_KEY_ID", "Access key")
        secret = secret_key or os.environ.get("AWS_SECRET_ACCESS_KEY")
        signer = None
        if secret:
            signer = SigV4Signer(
                access,
                secret,
                session_token=session_token or os.environ.get("AWS_SESSION_TOKEN"),
            )

        config = SignerConfig(
            base_url=_require(base_url, "CLOUDFRONT_BASE_URL", "Base URL"),
            key_pair_id=access,
        )
        return cls(config, request_signer=signer, endpoint=endpoint, fetcher=fetcher)

    @classmethod
    def from_env(cls, *, fetcher: Fetcher | None = None) -> "CloudFront":
        if os.environ.get("CLOUDFRONT_PRIVATE_KEY_PATH"):
            return cls.new(request_signer=_env_request_signer(), fetcher=fetcher)
        return cls.key_less(fetcher=fetcher)

    def canned_signed_url(
        self,
        path: str,
        query_string: str = "",
        *,
        expires: datetime,
        require_signature: bool = False,
    ) -> str:
        return canned_signed_url(
            self.config,
            path,
            query_string,
            expires=expires,
            require_signature=require_signature,
        )

    def signed_url(self, path: str, query_string: str, *, expires: datetime) -> str:
        """Legacy-format URL; see :func:`cloudfront_client.url_signing.legacy_signed_url`."""
        return legacy_signed_url(self.config, path, query_string, expires=expires)

    def distribution_url(self) -> str:
        return f"{self.endpoint}/{API_VERSION}/distribution"

    def create_distribution(
        self,
        config: DistributionConfig,
        *,
        timeout: float | None = None,
    ) -> CreateDistributionResult:
        if self._request_signer is None:
            raise CloudFrontError("create_distribution requires AWS credentials for request signing")

        if not config.caller_reference:
            config = dataclasses.replace(config, caller_reference=str(int(time.time())))

        body = marshal_distribution_config(config)
        signed = self._request_signer(
            self.distribution_url(),
            "POST",
            {"Content-Type": "text/xml"},
            body,
        )

        logger.debug("POST %s (%d bytes, caller reference %s)", signed.url, len(body), config.caller_reference)
        response = self._fetcher(signed.url, signed.method, signed.headers, body, timeout)
        logger.debug("CloudFront responded %s", response.status_line)

        if response.status >= 400:
            raise parse_error_response(response.body, response.status, response.status_line)

        return CreateDistributionResult(
            status=response.status,
            location=_header(response.headers, "Location"),
            etag=_header(response.headers, "ETag"),
            body=response.body,
        )


def _header(headers: dict[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None
