"""Translate catalog entries into `cryptography` parameter objects.

A verifier holding a signer's public key and a signature algorithm id needs
the matching padding, hash and signature-algorithm objects to call
`public_key.verify(...)`. This module builds those objects from the catalog so
that no other module hardcodes salt lengths or hashes.

Nothing here signs or verifies; callers do that with the returned objects:

    alg = find_by_id(0x0101)
    public_key.verify(signature, signed_data, *verification_arguments(alg))
"""

from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa

from apksig.core.content_digest import HASH_CLASSES
from apksig.core.signature_algorithm import (
    PSS_TRAILER_FIELD_BC,
    KeyAlgorithm,
    PssSignatureScheme,
    SignatureAlgorithm,
    SignatureAlgorithmError,
)

PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey, dsa.DSAPublicKey]
PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey, dsa.DSAPrivateKey]

_KEY_TYPES = (
    ((rsa.RSAPublicKey, rsa.RSAPrivateKey), KeyAlgorithm.RSA),
    ((ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey), KeyAlgorithm.EC),
    ((dsa.DSAPublicKey, dsa.DSAPrivateKey), KeyAlgorithm.DSA),
)


class UnsupportedParameterError(SignatureAlgorithmError, ValueError):
    """The requested parameter object does not apply to this algorithm or key."""
    pass


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    """Return a new hash instance for a hash name such as "SHA-256"."""
    try:
        return HASH_CLASSES[name]()
    except KeyError:
        raise UnsupportedParameterError(f"Unsupported hash algorithm: {name}") from None


def signature_hash(alg: SignatureAlgorithm) -> hashes.HashAlgorithm:
    """Hash used by the signature scheme (not the content digest)."""
    return hash_algorithm(alg.signature_scheme.hash_name)


def rsa_padding(alg: SignatureAlgorithm) -> padding.AsymmetricPadding:
    """RSA padding for an RSA entry: PSS with its exact parameters, or PKCS#1 v1.5."""
    if alg.key_algorithm is not KeyAlgorithm.RSA:
        raise UnsupportedParameterError(f"{alg.name} does not use RSA padding")

    scheme = alg.signature_scheme
    if isinstance(scheme, PssSignatureScheme):
        params = scheme.parameters
        if params.mgf_name != "MGF1":
            raise UnsupportedParameterError(f"Unsupported mask generation function: {params.mgf_name}")
        # cryptography only produces the 0xBC trailer
        if params.trailer_field != PSS_TRAILER_FIELD_BC:
            raise UnsupportedParameterError(f"Unsupported PSS trailer field: {params.trailer_field}")
        return padding.PSS(
            mgf=padding.MGF1(hash_algorithm(params.mgf_hash_name)),
            salt_length=params.salt_length,
        )
    return padding.PKCS1v15()


def ecdsa_signature_algorithm(alg: SignatureAlgorithm) -> ec.ECDSA:
    if alg.key_algorithm is not KeyAlgorithm.EC:
        raise UnsupportedParameterError(f"{alg.name} is not an ECDSA algorithm")
    return ec.ECDSA(signature_hash(alg))


def verification_arguments(alg: SignatureAlgorithm) -> tuple:
    """Arguments following (signature, data) in `public_key.verify()`.

    Signing takes the same arguments after `data` in `private_key.sign()`.
    """
    if alg.key_algorithm is KeyAlgorithm.RSA:
        return (rsa_padding(alg), signature_hash(alg))
    if alg.key_algorithm is KeyAlgorithm.EC:
        return (ecdsa_signature_algorithm(alg),)
    return (signature_hash(alg),)


def key_algorithm_of(key: Union[PublicKey, PrivateKey]) -> KeyAlgorithm:
    """Key algorithm family of an RSA, EC or DSA key."""
    for key_types, key_algorithm in _KEY_TYPES:
        if isinstance(key, key_types):
            return key_algorithm
    raise UnsupportedParameterError(f"Unsupported key type: {type(key).__name__}")


def is_compatible_key(alg: SignatureAlgorithm, key: Union[PublicKey, PrivateKey]) -> bool:
    """Whether the key belongs to the family the algorithm requires."""
    try:
        return key_algorithm_of(key) is alg.key_algorithm
    except UnsupportedParameterError:
        return False
