"""Tests for content digest algorithms and SDK versions."""

import pytest
from cryptography.hazmat.primitives import hashes

from apksig.core.content_digest import (
    CHUNK_SIZE_BYTES,
    VERITY_CHUNK_SIZE_BYTES,
    ContentDigestAlgorithm,
)
from apksig.core.sdk_version import AndroidSdkVersion


class TestContentDigestAlgorithm:
    """Tests for the content digest enumeration."""

    def test_chunked_sha256(self):
        """Test 1 MB chunked SHA-256."""
        alg = ContentDigestAlgorithm.CHUNKED_SHA256

        assert alg.id == 1
        assert alg.hash_name == "SHA-256"
        assert alg.digest_output_size == 32
        assert alg.chunk_size == 1024 * 1024
        assert not alg.is_verity

    def test_chunked_sha512(self):
        """Test 1 MB chunked SHA-512."""
        alg = ContentDigestAlgorithm.CHUNKED_SHA512

        assert alg.id == 2
        assert alg.hash_name == "SHA-512"
        assert alg.digest_output_size == 64
        assert alg.chunk_size == CHUNK_SIZE_BYTES

    def test_verity_chunked_sha256(self):
        """Test fs-verity style 4 KB chunked SHA-256."""
        alg = ContentDigestAlgorithm.VERITY_CHUNKED_SHA256

        assert alg.id == 3
        assert alg.hash_name == "SHA-256"
        assert alg.digest_output_size == 32
        assert alg.chunk_size == VERITY_CHUNK_SIZE_BYTES == 4096
        assert alg.is_verity

    def test_whole_content_sha256(self):
        """Test SHA-256 over the whole content has no chunk size."""
        alg = ContentDigestAlgorithm.SHA256

        assert alg.id == 4
        assert alg.chunk_size is None
        assert not alg.is_verity

    @pytest.mark.parametrize("alg", list(ContentDigestAlgorithm))
    def test_hash_algorithm_matches_output_size(self, alg):
        """Test the cryptography hash agrees with the declared digest size."""
        hash_alg = alg.hash_algorithm()

        assert isinstance(hash_alg, hashes.HashAlgorithm)
        assert hash_alg.digest_size == alg.digest_output_size

    def test_hash_algorithm_returns_new_instances(self):
        """Test callers get their own hash objects."""
        alg = ContentDigestAlgorithm.CHUNKED_SHA512
        assert alg.hash_algorithm() is not alg.hash_algorithm()
        assert isinstance(alg.hash_algorithm(), hashes.SHA512)

    def test_find_by_id(self):
        """Test lookup by digest id."""
        for alg in ContentDigestAlgorithm:
            assert ContentDigestAlgorithm.find_by_id(alg.id) is alg
        assert ContentDigestAlgorithm.find_by_id(0) is None
        assert ContentDigestAlgorithm.find_by_id(5) is None


class TestAndroidSdkVersion:
    """Tests for Android API level constants."""

    def test_signature_scheme_levels(self):
        """Test the API levels the catalog relies on."""
        assert AndroidSdkVersion.N == 24
        assert AndroidSdkVersion.P == 28
        assert AndroidSdkVersion.R == 30
        assert AndroidSdkVersion.T == 33

    def test_levels_are_ordered(self):
        """Test later releases compare greater."""
        levels = [int(v) for v in AndroidSdkVersion]
        assert levels == sorted(levels)
        assert AndroidSdkVersion.P > AndroidSdkVersion.N
