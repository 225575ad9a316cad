"""Shared SDK datatypes for the CloudFront client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Tuple, TypeVar

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

T = TypeVar("T")


@dataclass(frozen=True)
class SignerConfig:
    """Immutable credential and base URL held by a client for its lifetime.

    ``private_key`` is ``None`` in key-less mode, where ``key_pair_id`` is the
    access key id and generated URLs carry an unsigned digest.
    """

    base_url: str
    key_pair_id: str
    private_key: Optional[RSAPrivateKey] = None

    @property
    def key_less(self) -> bool:
        return self.private_key is None


@dataclass(frozen=True)
class EncodedCollection(Generic[T]):
    """Wire projection of an ordered collection: a count plus tagged items."""

    tag: str
    items: Tuple[T, ...]

    @property
    def quantity(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class S3OriginConfig:
    origin_access_identity: str = ""


@dataclass(frozen=True)
class CustomOriginConfig:
    http_port: int = 80
    https_port: int = 443
    origin_protocol_policy: str = "match-viewer"


@dataclass(frozen=True)
class Origin:
    id: str
    domain_name: str
    origin_path: str = ""
    s3_origin_config: S3OriginConfig | None = None
    custom_origin_config: CustomOriginConfig | None = None


@dataclass(frozen=True)
class Cookies:
    forward: str = "none"
    whitelisted_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ForwardedValues:
    query_string: bool = False
    cookies: Cookies = field(default_factory=Cookies)
    headers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TrustedSigners:
    enabled: bool = False
    aws_account_numbers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AllowedMethods:
    """Allowed HTTP methods and the cached subset.

    The cached list is not checked against the allowed list.
    """

    allowed: list[str] = field(default_factory=lambda: ["GET", "HEAD"])
    cached: list[str] = field(default_factory=lambda: ["GET", "HEAD"])


@dataclass(frozen=True)
class CacheBehavior:
    target_origin_id: str
    path_pattern: str = ""
    forwarded_values: ForwardedValues = field(default_factory=ForwardedValues)
    trusted_signers: TrustedSigners = field(default_factory=TrustedSigners)
    viewer_protocol_policy: str = "allow-all"
    min_ttl: int = 0
    allowed_methods: AllowedMethods = field(default_factory=AllowedMethods)
    smooth_streaming: bool = False


@dataclass(frozen=True)
class CustomErrorResponse:
    error_code: int
    response_page_path: str = ""
    response_code: int = 0
    error_caching_min_ttl: int = 0


@dataclass(frozen=True)
class GeoRestriction:
    restriction_type: str = "none"
    locations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Logging:
    enabled: bool = False
    include_cookies: bool = False
    bucket: str = ""
    prefix: str = ""


@dataclass(frozen=True)
class ViewerCertificate:
    iam_certificate_id: str = ""
    cloudfront_default_certificate: bool = False
    ssl_support_method: str = ""
    minimum_protocol_version: str = ""


@dataclass(frozen=True)
class DistributionConfig:
    default_cache_behavior: CacheBehavior
    caller_reference: str = ""
    aliases: list[str] = field(default_factory=list)
    default_root_object: str = ""
    origins: list[Origin] = field(default_factory=list)
    comment: str = ""
    cache_behaviors: list[CacheBehavior] = field(default_factory=list)
    custom_error_responses: list[CustomErrorResponse] = field(default_factory=list)
    restrictions: GeoRestriction = field(default_factory=GeoRestriction)
    logging: Logging = field(default_factory=Logging)
    viewer_certificate: ViewerCertificate | None = None
    price_class: str = "PriceClass_All"
    enabled: bool = True


@dataclass(frozen=True)
class SignedRequest:
    url: str
    method: str
    headers: dict[str, str]
    body: bytes | None


@dataclass(frozen=True)
class FetchResponse:
    status: int
    reason: str
    headers: dict[str, str]
    body: bytes

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}".strip()


@dataclass(frozen=True)
class CreateDistributionResult:
    status: int
    location: str | None
    etag: str | None
    body: bytes


class JsonDict(dict[str, Any]):
    """Typed alias for JSON dictionaries used in policy serialization."""
