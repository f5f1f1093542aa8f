"""Content digest algorithms used over the signed contents of an APK.

- CHUNKED_SHA256 / CHUNKED_SHA512: the content is split into 1 MB chunks,
  each chunk is hashed, and the chunk digests are hashed together
- VERITY_CHUNKED_SHA256: SHA-256 over 4 KB chunks in the same way fs-verity
  builds its Merkle tree; the root hash and the content length (8 bytes,
  little endian) form the final digest
- SHA256: SHA-256 over the whole content (APK Signature Scheme v4)

Only the description lives here; computing digests is up to the caller.
"""

from enum import Enum

from cryptography.hazmat.primitives import hashes

CHUNK_SIZE_BYTES = 1024 * 1024
VERITY_CHUNK_SIZE_BYTES = 4096

HASH_CLASSES: dict[str, type[hashes.HashAlgorithm]] = {
    "SHA-256": hashes.SHA256,
    "SHA-512": hashes.SHA512,
}


class ContentDigestAlgorithm(Enum):
    """APK content digest algorithm."""

    # (id, hash name, digest output size in bytes, chunk size in bytes)
    CHUNKED_SHA256 = (1, "SHA-256", 256 // 8, CHUNK_SIZE_BYTES)
    CHUNKED_SHA512 = (2, "SHA-512", 512 // 8, CHUNK_SIZE_BYTES)
    VERITY_CHUNKED_SHA256 = (3, "SHA-256", 256 // 8, VERITY_CHUNK_SIZE_BYTES)
    SHA256 = (4, "SHA-256", 256 // 8, None)

    def __init__(self, id: int, hash_name: str, digest_output_size: int, chunk_size: int | None):
        self._id = id
        self._hash_name = hash_name
        self._digest_output_size = digest_output_size
        self._chunk_size = chunk_size

    @property
    def id(self) -> int:
        return self._id

    @property
    def hash_name(self) -> str:
        """Hash algorithm name, e.g. "SHA-256"."""
        return self._hash_name

    @property
    def digest_output_size(self) -> int:
        """Size in bytes of the digest this algorithm produces."""
        return self._digest_output_size

    @property
    def chunk_size(self) -> int | None:
        """Chunk size in bytes, or None when the content is hashed whole."""
        return self._chunk_size

    @property
    def is_verity(self) -> bool:
        return self is ContentDigestAlgorithm.VERITY_CHUNKED_SHA256

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a new cryptography hash instance for this digest."""
        return HASH_CLASSES[self._hash_name]()

    @classmethod
    def find_by_id(cls, id: int) -> "ContentDigestAlgorithm | None":
        for alg in cls:
            if alg.id == id:
                return alg
        return None
