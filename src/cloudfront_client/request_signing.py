"""AWS Signature Version 4 for CloudFront management requests."""

from __future__ import annotations

from typing import Callable

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from cloudfront_client.types import SignedRequest

DEFAULT_REGION = "us-east-1"
DEFAULT_SERVICE = "cloudfront"

RequestSigner = Callable[[str, str, dict[str, str], bytes], SignedRequest]


class SigV4Signer:
    """Adds SigV4 ``Authorization`` headers to an outgoing request.

    Instances are callables matching :data:`RequestSigner`, so any other
    signer with the same call shape can be passed to the client instead.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        *,
        session_token: str | None = None,
        region: str = DEFAULT_REGION,
        service: str = DEFAULT_SERVICE,
    ):
        if not access_key or not secret_key:
            raise ValueError("SigV4 signing requires an access key and a secret key")
        self.access_key = access_key
        self.region = region
        self.service = service
        self._auth = SigV4Auth(Credentials(access_key, secret_key, session_token), service, region)

    def __call__(self, url: str, method: str, headers: dict[str, str], body: bytes) -> SignedRequest:
        request = AWSRequest(method=method.upper(), url=url, data=body, headers=dict(headers))
        self._auth.add_auth(request)
        return SignedRequest(
            url=url,
            method=request.method,
            headers=dict(request.headers.items()),
            body=body,
        )
