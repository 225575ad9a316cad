from __future__ import annotations

import base64
import hashlib
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from cloudfront_client import CloudFront, SignerConfig, UnsignedSignatureError
from cloudfront_client.url_signing import (
    build_policy,
    canned_resource,
    epoch_seconds,
    generate_signature,
    url_safe_b64encode,
)

BASE_URL = "https://d111111abcdef8.cloudfront.net"
KEY_PAIR_ID = "APKAEXAMPLE123"

EXPIRES = datetime(2024, 1, 1, tzinfo=timezone.utc)
EPOCH = 1704067200


def _decode_signature(value: str) -> bytes:
    return base64.b64decode(value.translate(str.maketrans({"_": "=", "-": "+", "~": "/"})))


def test_policy_bytes_for_fixed_vector() -> None:
    policy = build_policy(canned_resource(BASE_URL, "/videos/x.mp4"), EXPIRES)

    expected = (
        '{"Statement":[{"Resource":"' + BASE_URL + '/videos/x.mp4",'
        '"Condition":{"DateLessThan":{"AWS:EpochTime":1704067200}}}]}'
    )
    assert policy == expected.encode("utf-8")


def test_resource_uses_path_and_query_when_query_given() -> None:
    assert canned_resource(BASE_URL, "/videos/x.mp4", "a=1") == "/videos/x.mp4?a=1"
    assert canned_resource(BASE_URL, "/videos/x.mp4") == BASE_URL + "/videos/x.mp4"


def test_epoch_seconds_truncates_and_treats_naive_as_utc() -> None:
    assert epoch_seconds(EXPIRES) == EPOCH
    assert epoch_seconds(datetime(2024, 1, 1, 0, 0, 0, 999999)) == EPOCH
    assert epoch_seconds(datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=timezone.utc)) == -1


def test_url_safe_b64encode_substitutes_characters() -> None:
    encoded = url_safe_b64encode(b"\xfb\xff\xfe")
    assert encoded == "-~~-"
    assert url_safe_b64encode(b"a") == "YQ__"


def test_canned_signed_url_fixed_vector(signing_client, rsa_key) -> None:
    url = signing_client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}" == BASE_URL
    assert parts.path == "/videos/x.mp4"
    assert parts.query.startswith(f"Expires={EPOCH}&Signature=")
    assert parts.query.endswith(f"&Key-Pair-Id={KEY_PAIR_ID}")

    signature = parts.query.split("Signature=", 1)[1].split("&", 1)[0]
    assert "=" not in signature and "+" not in signature and "/" not in signature

    policy = build_policy(BASE_URL + "/videos/x.mp4", EXPIRES)
    rsa_key.public_key().verify(_decode_signature(signature), policy, padding.PKCS1v15(), hashes.SHA1())


def test_canned_signature_is_deterministic(signing_client) -> None:
    first = signing_client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)
    second = signing_client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)
    assert first == second


def test_canned_signed_url_keeps_caller_query_first(signing_client, rsa_key) -> None:
    url = signing_client.canned_signed_url("/videos/x.mp4", "a=1", expires=EXPIRES)

    query = urlsplit(url).query
    assert query.startswith(f"a=1&Expires={EPOCH}&Signature=")
    params = parse_qs(query)
    assert params["Key-Pair-Id"] == [KEY_PAIR_ID]

    signature = query.split("Signature=", 1)[1].split("&", 1)[0]
    rsa_key.public_key().verify(
        _decode_signature(signature),
        build_policy("/videos/x.mp4?a=1", EXPIRES),
        padding.PKCS1v15(),
        hashes.SHA1(),
    )


def test_key_less_client_uses_raw_digest(key_less_client, caplog) -> None:
    with caplog.at_level("WARNING"):
        url = key_less_client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)

    digest = hashlib.sha1(build_policy(BASE_URL + "/videos/x.mp4", EXPIRES)).digest()
    assert f"Signature={url_safe_b64encode(digest)}&" in url
    assert url.endswith("Key-Pair-Id=AKIAEXAMPLE")
    assert "unsigned" in caplog.text.lower()


def test_key_less_client_can_refuse_unsigned_urls(key_less_client) -> None:
    with pytest.raises(UnsignedSignatureError):
        key_less_client.canned_signed_url("/videos/x.mp4", expires=EXPIRES, require_signature=True)


def test_generate_signature_without_key_is_digest() -> None:
    policy = b'{"Statement":[]}'
    assert generate_signature(policy, None) == url_safe_b64encode(hashlib.sha1(policy).digest())


def test_malformed_base_url_is_rejected(rsa_key) -> None:
    client = CloudFront(SignerConfig(base_url="not a url", key_pair_id=KEY_PAIR_ID, private_key=rsa_key))
    with pytest.raises(ValueError, match="Malformed base URL"):
        client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)


def test_legacy_url_layout(signing_client) -> None:
    url = signing_client.signed_url("/videos/x.mp4", "", expires=EXPIRES)

    policy = (
        '{"Statement":[{"Resource":"/videos/x.mp4?,'
        '"Condition":{"DateLessThan":{"AWS:EpochTime":1704067200}}}]}'
    )
    digest = base64.b64encode(hashlib.sha1(policy.encode("utf-8")).digest()).decode("ascii")
    assert url == (
        f"{BASE_URL}/videos/x.mp4?&Expires={EPOCH}&Signature={digest}&Key-Pair-Id={KEY_PAIR_ID}"
    )


def test_legacy_and_canned_urls_differ(signing_client, key_less_client) -> None:
    for client in (signing_client, key_less_client):
        for query in ("", "a=1"):
            canned = client.canned_signed_url("/videos/x.mp4", query, expires=EXPIRES)
            legacy = client.signed_url("/videos/x.mp4", query, expires=EXPIRES)
            assert canned != legacy


FIXED_SIGNATURE = (
    "IbdFx-fYs9xeLoN3uhxnSAdab6b3cFjMrnom-fCEH0N03lPsDbmB73gcUl9k16wa~z0pZxGKX88xORihWm02hEwx"
    "O75Y0YQCnigHsxuySPRLquRrXTGphc1OAFev1FH-YN0eDT~9-tAOlS9ebkOG9U718cTYnHxLqDKpifb8L086udCq"
    "6gE2U3KUf57t2nHM0QfmpIw28qH4xNBvCZHcEQelEG0DLbgSKr5tVCdHea768B-c2aFUQ5oJift1ZtsP6PfNrgHP"
    "3Es8OpkF0VccB4ad5L4Tk5IjIHIDRDU6ppknt2Qs6AxQxJHQKPcuBd-uXnt6ZXkVgPyciaA8Tjw6NQ__"
)


def test_canned_signed_url_matches_known_signature(fixed_rsa_key) -> None:
    client = CloudFront(SignerConfig(base_url=BASE_URL, key_pair_id=KEY_PAIR_ID, private_key=fixed_rsa_key))

    url = client.canned_signed_url("/videos/x.mp4", expires=EXPIRES)

    assert url == (
        f"{BASE_URL}/videos/x.mp4?Expires={EPOCH}&Signature={FIXED_SIGNATURE}&Key-Pair-Id={KEY_PAIR_ID}"
    )
