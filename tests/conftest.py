from __future__ import annotations

from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from cloudfront_client import CloudFront, SignerConfig, load_private_key_file

BASE_URL = "https://d111111abcdef8.cloudfront.net"
KEY_PAIR_ID = "APKAEXAMPLE123"
FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def signing_client(rsa_key) -> CloudFront:
    return CloudFront(SignerConfig(base_url=BASE_URL, key_pair_id=KEY_PAIR_ID, private_key=rsa_key))


@pytest.fixture
def key_less_client() -> CloudFront:
    return CloudFront(SignerConfig(base_url=BASE_URL, key_pair_id="AKIAEXAMPLE"))


@pytest.fixture(scope="session")
def fixed_rsa_key() -> rsa.RSAPrivateKey:
    return load_private_key_file(FIXTURES / "cloudfront_test_key.pem")
