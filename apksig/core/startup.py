"""Catalog self-check.

Validates the signature-algorithm catalog before callers rely on it. A wrong
salt length or a hash mismatch between the content digest and the signature
scheme is a programmer error that silently breaks verification, so the checks
run once at startup (and in the test suite).

Validation levels:
- STRICT: All critical checks must pass (default)
- WARN: Log failures but continue
- SKIP: Skip validation
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from apksig.config import get_settings
from apksig.core.crypto_params import UnsupportedParameterError, hash_algorithm
from apksig.core.logging import (
    get_logger,
    log_context,
    log_operation,
    setup_logging_from_settings,
)
from apksig.core.signature_algorithm import (
    MAX_ALGORITHM_ID,
    KeyAlgorithm,
    PssSignatureScheme,
    SignatureAlgorithm,
    SignatureAlgorithmError,
)

logger = get_logger(__name__)

# Scheme name suffix expected for each key family
_SCHEME_SUFFIXES = {
    KeyAlgorithm.RSA: ("withRSA", "withRSA/PSS"),
    KeyAlgorithm.EC: ("withECDSA",),
    KeyAlgorithm.DSA: ("withDSA",),
}

# "SHA256withRSA/PSS" -> "256"
_SCHEME_NAME_HASH = re.compile(r"^SHA(\d+)with")
_PSS_SUFFIX = "/PSS"


class CatalogValidationError(SignatureAlgorithmError):
    """The catalog failed a critical consistency check."""
    pass


class ValidationLevel(str, Enum):
    """Validation strictness levels."""
    STRICT = "strict"  # Fail if any critical check fails
    WARN = "warn"      # Log warnings, continue
    SKIP = "skip"      # Skip all validation


@dataclass
class ValidationResult:
    """Result of a validation check."""
    name: str
    passed: bool
    message: str
    critical: bool = True  # If critical, failure blocks startup in STRICT mode


class CatalogValidator:
    """Checks the invariants every catalog entry must satisfy."""

    def __init__(
        self,
        level: ValidationLevel = ValidationLevel.STRICT,
        entries: Iterable | None = None,
    ):
        self.level = level
        self.entries = list(entries) if entries is not None else list(SignatureAlgorithm)
        self.results: list[ValidationResult] = []

    def _check(
        self,
        name: str,
        problems: list[str],
        ok_message: str,
        critical: bool = True,
    ) -> ValidationResult:
        """Record a check that passes when no problems were found."""
        result = ValidationResult(
            name=name,
            passed=not problems,
            message="; ".join(problems) if problems else ok_message,
            critical=critical,
        )
        self.results.append(result)
        return result

    def validate_unique_ids(self) -> ValidationResult:
        seen: dict[int, str] = {}
        problems = []
        for entry in self.entries:
            if entry.id in seen:
                problems.append(f"id 0x{entry.id:04x} used by {seen[entry.id]} and {entry.name}")
            else:
                seen[entry.id] = entry.name
        return self._check("unique_ids", problems, f"{len(seen)} distinct ids")

    def validate_id_range(self) -> ValidationResult:
        problems = [
            f"{entry.name} id {entry.id} outside 1..0x{MAX_ALGORITHM_ID:x}"
            for entry in self.entries
            if not 0 < entry.id <= MAX_ALGORITHM_ID
        ]
        return self._check("id_range", problems, "All ids fit in an unsigned 32-bit integer")

    def validate_pss_parameters(self) -> ValidationResult:
        """Salt length equals the hash length, MGF1 uses the signature hash."""
        problems = []
        for entry in self.entries:
            scheme = entry.signature_scheme
            if not isinstance(scheme, PssSignatureScheme):
                continue
            params = scheme.parameters
            try:
                digest_size = hash_algorithm(params.hash_name).digest_size
            except UnsupportedParameterError as e:
                problems.append(f"{entry.name}: {e}")
                continue
            if params.salt_length != digest_size:
                problems.append(
                    f"{entry.name}: salt length {params.salt_length} != "
                    f"{params.hash_name} digest length {digest_size}"
                )
            if params.mgf_hash_name != params.hash_name:
                problems.append(
                    f"{entry.name}: MGF1 hash {params.mgf_hash_name} != signature hash {params.hash_name}"
                )
        return self._check("pss_parameters", problems, "PSS parameters are consistent")

    def validate_scheme_hash(self) -> ValidationResult:
        """The signature hash matches the content digest hash."""
        problems = [
            f"{entry.name}: scheme hash {entry.signature_scheme.hash_name} != "
            f"content digest hash {entry.content_digest_algorithm.hash_name}"
            for entry in self.entries
            if entry.signature_scheme.hash_name != entry.content_digest_algorithm.hash_name
        ]
        return self._check("scheme_hash", problems, "Signature and content digest hashes agree")

    def validate_scheme_name(self) -> ValidationResult:
        """The scheme name agrees with its variant and its hash."""
        problems = []
        for entry in self.entries:
            scheme = entry.signature_scheme
            is_pss = isinstance(scheme, PssSignatureScheme)
            if is_pss != scheme.name.endswith(_PSS_SUFFIX):
                kind = "carries PSS parameters" if is_pss else "has no PSS parameters"
                problems.append(f"{entry.name}: scheme {scheme.name} {kind}")
            match = _SCHEME_NAME_HASH.match(scheme.name)
            if match is None:
                problems.append(f"{entry.name}: scheme {scheme.name} does not name its hash")
            elif f"SHA-{match.group(1)}" != scheme.hash_name:
                problems.append(f"{entry.name}: scheme {scheme.name} does not use {scheme.hash_name}")
        return self._check("scheme_name", problems, "Scheme names match their parameters")

    def validate_key_algorithm(self) -> ValidationResult:
        """The scheme name belongs to the entry's key family."""
        problems = []
        for entry in self.entries:
            scheme = entry.signature_scheme
            if isinstance(scheme, PssSignatureScheme) and entry.key_algorithm is not KeyAlgorithm.RSA:
                problems.append(f"{entry.name}: PSS requires an RSA key")
            if not scheme.name.endswith(_SCHEME_SUFFIXES[entry.key_algorithm]):
                problems.append(f"{entry.name}: scheme {scheme.name} does not match {entry.key_algorithm.value} keys")
        return self._check("key_algorithm", problems, "Schemes match their key families")

    def validate_verity_min_sdk(self) -> ValidationResult:
        """fs-verity digests were introduced after 1 MB chunked digests."""
        problems = []
        chunked = [e for e in self.entries if not e.content_digest_algorithm.is_verity]
        for entry in self.entries:
            if not entry.content_digest_algorithm.is_verity:
                continue
            for other in chunked:
                same_family = other.key_algorithm is entry.key_algorithm
                same_hash = other.content_digest_algorithm.hash_name == entry.content_digest_algorithm.hash_name
                if same_family and same_hash and entry.min_sdk_version < other.min_sdk_version:
                    problems.append(
                        f"{entry.name}: min SDK {entry.min_sdk_version} below "
                        f"{other.name} min SDK {other.min_sdk_version}"
                    )
        return self._check(
            "verity_min_sdk",
            problems,
            "Verity entries require the same or a later SDK",
        )

    @log_operation("catalog validation")
    def run_all(self) -> list[ValidationResult]:
        """Run all validation checks."""
        self.validate_unique_ids()
        self.validate_id_range()
        self.validate_pss_parameters()
        self.validate_scheme_hash()
        self.validate_scheme_name()
        self.validate_key_algorithm()
        self.validate_verity_min_sdk()
        return self.results

    def report(self) -> bool:
        """Report validation results and return success status."""
        if not self.results:
            self.run_all()

        passed = []
        warnings = []
        failed = []

        for result in self.results:
            if result.passed:
                passed.append(result)
            elif result.critical:
                failed.append(result)
            else:
                warnings.append(result)

        logger.info(
            "Catalog validation",
            entries=len(self.entries),
            passed=len(passed),
            warnings=len(warnings),
            failed=len(failed),
        )

        for result in passed:
            logger.debug(f"  [PASS] {result.name}: {result.message}")

        for result in warnings:
            logger.warning(f"  [WARN] {result.name}: {result.message}")

        for result in failed:
            logger.error(f"  [FAIL] {result.name}: {result.message}")

        if self.level in (ValidationLevel.SKIP, ValidationLevel.WARN):
            return True

        # STRICT mode: fail if any critical check failed
        return len(failed) == 0


def validate_catalog(entries: Iterable | None = None) -> list[ValidationResult]:
    """Run every check and return the results without logging a report."""
    return CatalogValidator(entries=entries).run_all()


def run_startup_validation(level: ValidationLevel | None = None) -> bool:
    """Validate the catalog.

    Args:
        level: Validation level (default: from APKSIG_CATALOG_VALIDATION)

    Returns:
        True if validation passed, False otherwise

    Raises:
        CatalogValidationError: If STRICT mode and validation failed
    """
    if level is None:
        level = ValidationLevel(get_settings().catalog_validation)

    if level == ValidationLevel.SKIP:
        logger.info("Catalog validation skipped (APKSIG_CATALOG_VALIDATION=skip)")
        return True

    validator = CatalogValidator(level)
    with log_context(catalog_validation=level.value):
        success = validator.report()

    if not success and level == ValidationLevel.STRICT:
        failed = [r for r in validator.results if not r.passed and r.critical]
        raise CatalogValidationError(
            "Catalog validation failed: " + "; ".join(f"{r.name}: {r.message}" for r in failed)
        )

    return success


def initialize() -> bool:
    """Configure logging from settings, then validate the catalog."""
    setup_logging_from_settings()
    return run_startup_validation()
