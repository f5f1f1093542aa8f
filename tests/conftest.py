"""Test configuration and fixtures."""

import os

import pytest
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa

# Set up test environment variables BEFORE importing package modules
os.environ.setdefault("APKSIG_ENVIRONMENT", "development")
os.environ.setdefault("APKSIG_CATALOG_VALIDATION", "strict")

from apksig.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings():
    """Clear cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """RSA-2048 signer key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    """EC P-256 signer key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def dsa_private_key() -> dsa.DSAPrivateKey:
    """DSA-2048 signer key."""
    return dsa.generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def private_keys(rsa_private_key, ec_private_key, dsa_private_key) -> dict:
    """Signer keys by key algorithm family name."""
    return {
        "RSA": rsa_private_key,
        "EC": ec_private_key,
        "DSA": dsa_private_key,
    }
