"""APK Signing Block signature algorithms.

The closed catalog of signature algorithm ids that may appear in an APK
Signing Block (APK Signature Scheme v2 and later). Each id is bound to:
- the content digest algorithm used over the signed contents
- the key algorithm family of the signer (RSA, EC, DSA)
- the signature scheme and, where the scheme has any, its exact parameters
- the minimum Android SDK version that understands the algorithm

The ids are part of the signing block wire format and never change meaning.
Callers probing for unsupported ids get None back from find_by_id(); deciding
which algorithms to accept for a given minSdkVersion is left to the caller.

References:
- https://source.android.com/docs/security/features/apksigning/v2
- RFC 8017: RSASSA-PSS and RSASSA-PKCS1-v1_5
- FIPS 186-4: DSA, ECDSA
"""

from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import Any, Mapping, Union

from apksig.core.content_digest import ContentDigestAlgorithm
from apksig.core.logging import get_logger
from apksig.core.sdk_version import AndroidSdkVersion

logger = get_logger(__name__)

MAX_ALGORITHM_ID = 0xFFFFFFFF

# RSASSA-PSS trailer field 1 is the 0xBC trailer byte (RFC 8017, A.2.3)
PSS_TRAILER_FIELD_BC = 1
PSS_TRAILER_BYTE = 0xBC


class SignatureAlgorithmError(Exception):
    """Base signature algorithm exception."""
    pass


class UnknownSignatureAlgorithmError(SignatureAlgorithmError, KeyError):
    """No catalog entry has the requested id."""

    def __init__(self, algorithm_id: Any):
        self.algorithm_id = algorithm_id
        super().__init__(algorithm_id)

    def __str__(self) -> str:
        if isinstance(self.algorithm_id, int):
            return f"Unknown signature algorithm id: 0x{self.algorithm_id:04x}"
        return f"Unknown signature algorithm id: {self.algorithm_id!r}"


class KeyAlgorithm(str, Enum):
    """Key algorithm family of a signer's key."""
    RSA = "RSA"
    EC = "EC"
    DSA = "DSA"


@dataclass(frozen=True)
class PssParameters:
    """RSASSA-PSS parameters."""
    hash_name: str
    mgf_name: str
    mgf_hash_name: str
    salt_length: int  # bytes
    trailer_field: int

    @property
    def trailer_byte(self) -> int:
        if self.trailer_field != PSS_TRAILER_FIELD_BC:
            raise SignatureAlgorithmError(f"Unsupported PSS trailer field: {self.trailer_field}")
        return PSS_TRAILER_BYTE

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash_name,
            "mgf": self.mgf_name,
            "mgf_hash": self.mgf_hash_name,
            "salt_length": self.salt_length,
            "trailer_field": self.trailer_field,
        }


@dataclass(frozen=True)
class PlainSignatureScheme:
    """Signature scheme fully determined by its name (PKCS#1 v1.5, ECDSA, DSA)."""
    name: str
    hash_name: str


@dataclass(frozen=True)
class PssSignatureScheme:
    """RSASSA-PSS signature scheme with its explicit parameters."""
    name: str
    parameters: PssParameters

    @property
    def hash_name(self) -> str:
        return self.parameters.hash_name


SignatureScheme = Union[PlainSignatureScheme, PssSignatureScheme]


@dataclass(frozen=True)
class AlgorithmDescriptor:
    """A single catalog entry. Every field is required."""
    id: int
    content_digest_algorithm: ContentDigestAlgorithm
    key_algorithm: KeyAlgorithm
    signature_scheme: SignatureScheme
    min_sdk_version: int


def _pss(name: str, hash_name: str, salt_length: int) -> PssSignatureScheme:
    return PssSignatureScheme(
        name,
        PssParameters(hash_name, "MGF1", hash_name, salt_length, PSS_TRAILER_FIELD_BC),
    )


@unique
class SignatureAlgorithm(Enum):
    """APK Signing Block signature algorithm."""

    # RSASSA-PSS with SHA2-256 digest, SHA2-256 MGF1, 32 bytes of salt, trailer: 0xbc,
    # content digested using SHA2-256 in 1 MB chunks.
    RSA_PSS_WITH_SHA256 = AlgorithmDescriptor(
        0x0101,
        ContentDigestAlgorithm.CHUNKED_SHA256,
        KeyAlgorithm.RSA,
        _pss("SHA256withRSA/PSS", "SHA-256", 256 // 8),
        AndroidSdkVersion.N,
    )

    # RSASSA-PSS with SHA2-512 digest, SHA2-512 MGF1, 64 bytes of salt, trailer: 0xbc,
    # content digested using SHA2-512 in 1 MB chunks.
    RSA_PSS_WITH_SHA512 = AlgorithmDescriptor(
        0x0102,
        ContentDigestAlgorithm.CHUNKED_SHA512,
        KeyAlgorithm.RSA,
        _pss("SHA512withRSA/PSS", "SHA-512", 512 // 8),
        AndroidSdkVersion.N,
    )

    # RSASSA-PKCS1-v1_5 with SHA2-256 digest, content digested using SHA2-256 in 1 MB chunks.
    RSA_PKCS1_V1_5_WITH_SHA256 = AlgorithmDescriptor(
        0x0103,
        ContentDigestAlgorithm.CHUNKED_SHA256,
        KeyAlgorithm.RSA,
        PlainSignatureScheme("SHA256withRSA", "SHA-256"),
        AndroidSdkVersion.N,
    )

    # RSASSA-PKCS1-v1_5 with SHA2-512 digest, content digested using SHA2-512 in 1 MB chunks.
    RSA_PKCS1_V1_5_WITH_SHA512 = AlgorithmDescriptor(
        0x0104,
        ContentDigestAlgorithm.CHUNKED_SHA512,
        KeyAlgorithm.RSA,
        PlainSignatureScheme("SHA512withRSA", "SHA-512"),
        AndroidSdkVersion.N,
    )

    # ECDSA with SHA2-256 digest, content digested using SHA2-256 in 1 MB chunks.
    ECDSA_WITH_SHA256 = AlgorithmDescriptor(
        0x0201,
        ContentDigestAlgorithm.CHUNKED_SHA256,
        KeyAlgorithm.EC,
        PlainSignatureScheme("SHA256withECDSA", "SHA-256"),
        AndroidSdkVersion.N,
    )

    # ECDSA with SHA2-512 digest, content digested using SHA2-512 in 1 MB chunks.
    ECDSA_WITH_SHA512 = AlgorithmDescriptor(
        0x0202,
        ContentDigestAlgorithm.CHUNKED_SHA512,
        KeyAlgorithm.EC,
        PlainSignatureScheme("SHA512withECDSA", "SHA-512"),
        AndroidSdkVersion.N,
    )

    # DSA with SHA2-256 digest, content digested using SHA2-256 in 1 MB chunks.
    DSA_WITH_SHA256 = AlgorithmDescriptor(
        0x0301,
        ContentDigestAlgorithm.CHUNKED_SHA256,
        KeyAlgorithm.DSA,
        PlainSignatureScheme("SHA256withDSA", "SHA-256"),
        AndroidSdkVersion.N,
    )

    # RSASSA-PKCS1-v1_5 with SHA2-256 digest, content digested using SHA2-256 in 4 KB
    # chunks the way fs-verity does. That digest and the content length (8 bytes, little
    # endian) form the final digest.
    VERITY_RSA_PKCS1_V1_5_WITH_SHA256 = AlgorithmDescriptor(
        0x0421,
        ContentDigestAlgorithm.VERITY_CHUNKED_SHA256,
        KeyAlgorithm.RSA,
        PlainSignatureScheme("SHA256withRSA", "SHA-256"),
        AndroidSdkVersion.P,
    )

    # ECDSA with SHA2-256 digest, fs-verity style 4 KB chunks (see above).
    VERITY_ECDSA_WITH_SHA256 = AlgorithmDescriptor(
        0x0423,
        ContentDigestAlgorithm.VERITY_CHUNKED_SHA256,
        KeyAlgorithm.EC,
        PlainSignatureScheme("SHA256withECDSA", "SHA-256"),
        AndroidSdkVersion.P,
    )

    # DSA with SHA2-256 digest, fs-verity style 4 KB chunks (see above).
    VERITY_DSA_WITH_SHA256 = AlgorithmDescriptor(
        0x0425,
        ContentDigestAlgorithm.VERITY_CHUNKED_SHA256,
        KeyAlgorithm.DSA,
        PlainSignatureScheme("SHA256withDSA", "SHA-256"),
        AndroidSdkVersion.P,
    )

    @property
    def id(self) -> int:
        """ID of this algorithm as used in the APK Signing Block wire format."""
        return self.value.id

    @property
    def content_digest_algorithm(self) -> ContentDigestAlgorithm:
        return self.value.content_digest_algorithm

    @property
    def key_algorithm(self) -> KeyAlgorithm:
        """Key algorithm family a signer must use with this algorithm."""
        return self.value.key_algorithm

    @property
    def signature_scheme(self) -> SignatureScheme:
        return self.value.signature_scheme

    @property
    def signature_scheme_and_parameters(self) -> tuple[str, PssParameters | None]:
        """Scheme name and its parameters, or None for schemes that take none."""
        scheme = self.value.signature_scheme
        if isinstance(scheme, PssSignatureScheme):
            return scheme.name, scheme.parameters
        return scheme.name, None

    @property
    def min_sdk_version(self) -> int:
        return self.value.min_sdk_version

    def describe(self) -> str:
        """Human-readable description of the algorithm."""
        scheme = self.signature_scheme
        digest = self.content_digest_algorithm
        hash_label = _hash_label(scheme.hash_name)

        if isinstance(scheme, PssSignatureScheme):
            params = scheme.parameters
            text = (
                f"RSASSA-PSS with {hash_label} digest, {_hash_label(params.mgf_hash_name)} "
                f"{params.mgf_name}, {params.salt_length} bytes of salt, "
                f"trailer: 0x{params.trailer_byte:02x}"
            )
        elif self.key_algorithm is KeyAlgorithm.RSA:
            text = f"RSASSA-PKCS1-v1_5 with {hash_label} digest"
        elif self.key_algorithm is KeyAlgorithm.EC:
            text = f"ECDSA with {hash_label} digest"
        else:
            text = f"DSA with {hash_label} digest"

        content_label = _hash_label(digest.hash_name)
        if digest.is_verity:
            return (
                f"{text}, content digested using {content_label} in 4 KB chunks, "
                f"in the same way fsverity operates"
            )
        return f"{text}, content digested using {content_label} in 1 MB chunks"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        name, params = self.signature_scheme_and_parameters
        return {
            "name": self.name,
            "id": self.id,
            "id_hex": f"0x{self.id:04x}",
            "content_digest_algorithm": self.content_digest_algorithm.name,
            "key_algorithm": self.key_algorithm.value,
            "signature_scheme": name,
            "parameters": params.to_dict() if params else None,
            "min_sdk_version": int(self.min_sdk_version),
        }


def _hash_label(hash_name: str) -> str:
    # "SHA-256" -> "SHA2-256"
    return hash_name.replace("SHA-", "SHA2-")


def _build_id_index() -> Mapping[int, SignatureAlgorithm]:
    index: dict[int, SignatureAlgorithm] = {}
    for alg in SignatureAlgorithm:
        if alg.id in index:
            raise SignatureAlgorithmError(
                f"Duplicate signature algorithm id 0x{alg.id:04x}: "
                f"{index[alg.id].name} and {alg.name}"
            )
        index[alg.id] = alg
    return MappingProxyType(index)


_BY_ID = _build_id_index()


def find_by_id(algorithm_id: int) -> SignatureAlgorithm | None:
    """Return the algorithm with the given wire id, or None if unknown."""
    if not isinstance(algorithm_id, int) or isinstance(algorithm_id, bool):
        return None
    alg = _BY_ID.get(algorithm_id)
    if alg is None:
        logger.debug("Unknown signature algorithm id", algorithm_id=algorithm_id)
    return alg


def get_by_id(algorithm_id: int) -> SignatureAlgorithm:
    """Return the algorithm with the given wire id.

    Raises:
        UnknownSignatureAlgorithmError: if no algorithm has this id
    """
    alg = find_by_id(algorithm_id)
    if alg is None:
        raise UnknownSignatureAlgorithmError(algorithm_id)
    return alg


def all_algorithms() -> tuple[SignatureAlgorithm, ...]:
    """All catalog entries, ordered by id."""
    return tuple(sorted(SignatureAlgorithm, key=lambda a: a.id))


def known_ids() -> frozenset[int]:
    return frozenset(_BY_ID)
