"""CloudFront Python client: signed URLs and distribution management."""

from cloudfront_client.client import CloudFront, urllib_fetcher
from cloudfront_client.encoding import (
    API_VERSION,
    decode_collection,
    encode_collection,
    marshal_distribution_config,
    write_collection,
)
from cloudfront_client.errors import CloudFrontAPIError, CloudFrontError, UnsignedSignatureError
from cloudfront_client.keys import load_private_key, load_private_key_file
from cloudfront_client.request_signing import SigV4Signer
from cloudfront_client.types import (
    AllowedMethods,
    CacheBehavior,
    Cookies,
    CreateDistributionResult,
    CustomErrorResponse,
    CustomOriginConfig,
    DistributionConfig,
    EncodedCollection,
    FetchResponse,
    ForwardedValues,
    GeoRestriction,
    Logging,
    Origin,
    S3OriginConfig,
    SignerConfig,
    TrustedSigners,
    ViewerCertificate,
)
from cloudfront_client.url_signing import (
    build_policy,
    canned_signed_url,
    legacy_signed_url,
    url_safe_b64encode,
)

__all__ = [
    "API_VERSION",
    "AllowedMethods",
    "CacheBehavior",
    "CloudFront",
    "CloudFrontAPIError",
    "CloudFrontError",
    "Cookies",
    "CreateDistributionResult",
    "CustomErrorResponse",
    "CustomOriginConfig",
    "DistributionConfig",
    "EncodedCollection",
    "FetchResponse",
    "ForwardedValues",
    "GeoRestriction",
    "Logging",
    "Origin",
    "S3OriginConfig",
    "SigV4Signer",
    "SignerConfig",
    "TrustedSigners",
    "UnsignedSignatureError",
    "ViewerCertificate",
    "build_policy",
    "canned_signed_url",
    "decode_collection",
    "encode_collection",
    "legacy_signed_url",
    "load_private_key",
    "load_private_key_file",
    "marshal_distribution_config",
    "url_safe_b64encode",
    "urllib_fetcher",
    "write_collection",
]

__version__ = "0.0.1"
