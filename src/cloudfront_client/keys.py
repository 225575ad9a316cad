"""RSA private key loading for signed URLs."""

from __future__ import annotations

from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

MIN_KEY_SIZE = 1024


def validate_private_key(key: object) -> RSAPrivateKey:
    """Return ``key`` if it is usable for CloudFront signatures, else raise ``ValueError``."""
    if not isinstance(key, RSAPrivateKey):
        raise ValueError(f"CloudFront signing requires an RSA private key, got {type(key).__name__}")
    if key.key_size < MIN_KEY_SIZE:
        raise ValueError(f"RSA key too small: {key.key_size} bits (minimum {MIN_KEY_SIZE})")
    return key


def load_private_key(data: bytes | str, password: bytes | None = None) -> RSAPrivateKey:
    """Load a PEM (PKCS#1 or PKCS#8) encoded RSA private key."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (TypeError, ValueError) as error:
        raise ValueError(f"Invalid private key: {error}") from error
    return validate_private_key(key)


def load_private_key_file(path: str | Path, password: bytes | None = None) -> RSAPrivateKey:
    key_path = Path(path)
    if not key_path.exists():
        raise ValueError(f"Private key file not found at {key_path}")
    return load_private_key(key_path.read_bytes(), password=password)
