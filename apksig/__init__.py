"""apksig - APK Signing Block signature-algorithm registry.

A read-only catalog of the signature algorithms an APK Signing Block may use:
- Wire-format algorithm ids (0x0101, 0x0421, ...)
- Content digest kind (1 MB chunked SHA-2, fs-verity style 4 KB chunks)
- Key family (RSA, EC, DSA)
- Signature scheme and its exact parameters (RSASSA-PSS salt, MGF1 hash)
- Minimum Android SDK version
"""

from apksig.core.content_digest import ContentDigestAlgorithm
from apksig.core.sdk_version import AndroidSdkVersion
from apksig.core.signature_algorithm import (
    KeyAlgorithm,
    PlainSignatureScheme,
    PssParameters,
    PssSignatureScheme,
    SignatureAlgorithm,
    SignatureAlgorithmError,
    UnknownSignatureAlgorithmError,
    find_by_id,
    get_by_id,
)

__version__ = "1.0.0"
__author__ = "apksig Contributors"

__all__ = [
    "AndroidSdkVersion",
    "ContentDigestAlgorithm",
    "KeyAlgorithm",
    "PlainSignatureScheme",
    "PssParameters",
    "PssSignatureScheme",
    "SignatureAlgorithm",
    "SignatureAlgorithmError",
    "UnknownSignatureAlgorithmError",
    "find_by_id",
    "get_by_id",
]
