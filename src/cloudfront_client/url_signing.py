"""CloudFront signed URLs.

Two modes live here and must stay separate:

* canned policy (:func:`canned_signed_url`): RSA-SHA1 over a compact JSON
  policy, URL-safe base64, as CloudFront verifies it;
* legacy (:func:`legacy_signed_url`): the historical string-built policy with
  an unsigned, plain-base64 SHA-1 digest. It exists only so links issued in
  that format keep resolving; it is not a valid CloudFront signature.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote, urlsplit, urlunsplit

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from cloudfront_client.errors import UnsignedSignatureError
from cloudfront_client.types import JsonDict, SignerConfig

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_URL_SAFE = str.maketrans({"=": "_", "+": "-", "/": "~"})
_PATH_SAFE = "/!$&'()*+,;=:@"


def url_safe_b64encode(value: bytes) -> str:
    """Standard base64 with ``=``, ``+`` and ``/`` swapped for ``_``, ``-`` and ``~``."""
    return base64.b64encode(value).decode("ascii").translate(_URL_SAFE)


def epoch_seconds(expires: datetime, *, truncate_to_millisecond: bool = True) -> int:
    """Whole seconds since the Unix epoch. Naive datetimes are read as UTC."""
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    if truncate_to_millisecond:
        expires = expires.replace(microsecond=expires.microsecond - expires.microsecond % 1000)
    return (expires - _EPOCH) // timedelta(seconds=1)


def canned_resource(base_url: str, path: str, query_string: str = "") -> str:
    # CloudFront expects the bare path plus query when a query string is given,
    # and the absolute URL otherwise.
    if query_string:
        return f"{path}?{query_string}"
    return base_url + path


def build_policy(resource: str, expires: datetime) -> bytes:
    policy = JsonDict({
        "Statement": [
            {
                "Resource": resource,
                "Condition": {
                    "DateLessThan": {
                        "AWS:EpochTime": epoch_seconds(expires),
                    },
                },
            },
        ],
    })
    return json.dumps(policy, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def generate_signature(policy: bytes, private_key: RSAPrivateKey | None) -> str:
    """Sign the SHA-1 digest of ``policy`` with RSA PKCS#1 v1.5.

    Without a private key the raw digest stands in for the signature. Such
    URLs are not accepted by CloudFront and are only useful against test
    origins that skip verification.
    """
    digest = hashlib.sha1(policy).digest()
    if private_key is None:
        signed = digest
    else:
        signed = private_key.sign(digest, padding.PKCS1v15(), Prehashed(hashes.SHA1()))
    return url_safe_b64encode(signed)


def _split_base_url(base_url: str) -> tuple[str, str]:
    try:
        parts = urlsplit(base_url)
    except ValueError as error:
        raise ValueError(f"Malformed base URL {base_url!r}: {error}") from error
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Malformed base URL {base_url!r}: scheme and host are required")
    return parts.scheme, parts.netloc


def canned_signed_url(
    config: SignerConfig,
    path: str,
    query_string: str = "",
    *,
    expires: datetime,
    require_signature: bool = False,
) -> str:
    """Build a canned-policy signed URL for ``path`` valid until ``expires``.

    ``query_string`` is the caller's raw query (without ``?``); it is kept in
    front of the ``Expires``/``Signature``/``Key-Pair-Id`` parameters.
    """
    scheme, netloc = _split_base_url(config.base_url)

    if config.private_key is None:
        if require_signature:
            raise UnsignedSignatureError(
                "Client has no private key; refusing to issue a digest-only URL",
            )
        logger.warning("Issuing unsigned CloudFront URL for %s (key-less client)", path)

    resource = canned_resource(config.base_url, path, query_string)
    policy = build_policy(resource, expires)
    signature = generate_signature(policy, config.private_key)

    query = f"{query_string}&" if query_string else ""
    query += f"Expires={epoch_seconds(expires)}&Signature={signature}&Key-Pair-Id={config.key_pair_id}"

    return urlunsplit((scheme, netloc, quote(path, safe=_PATH_SAFE), query, ""))


def legacy_signed_url(config: SignerConfig, path: str, query_string: str, *, expires: datetime) -> str:
    """Build a URL in the pre-canned-policy format.

    The layout is frozen: the policy text is concatenated by hand (its
    ``Resource`` value is never closed), the digest is plain base64 and is not
    signed, and ``?`` and ``&Expires`` are joined even when ``query_string``
    is empty. Existing links depend on every byte of it.
    """
    policy = (
        '{"Statement":[{"Resource":"' + path + "?" + query_string
        + ',"Condition":{"DateLessThan":{"AWS:EpochTime":'
        + str(epoch_seconds(expires)) + "}}}]}"
    )
    digest = base64.b64encode(hashlib.sha1(policy.encode("utf-8")).digest()).decode("ascii")

    return (
        config.base_url + path + "?" + query_string
        + "&Expires=" + str(epoch_seconds(expires, truncate_to_millisecond=False))
        + "&Signature=" + digest
        + "&Key-Pair-Id=" + config.key_pair_id
    )
