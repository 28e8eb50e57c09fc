"""Location Validator - detects addresses that went stale or drifted."""

from dataclasses import dataclass
from typing import Optional

import structlog

from doc_locator.core import DocumentTree, DriftWarning, Location
from doc_locator.services.content_fingerprint import DEFAULT_FINGERPRINT_LENGTH, compute_fingerprint
from doc_locator.services.location_resolver import LocationResolver

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a Location against the current tree.

    Attributes:
        resolved: The path still maps onto a node.
        drifted: A stored content hash no longer matches the node's text.
        valid: Final verdict under the requested mode.
        warning: Details of the hash mismatch, when drifted.
    """

    resolved: bool
    drifted: bool
    valid: bool
    warning: Optional[DriftWarning] = None


class LocationValidator:
    """
    Checks that a Location still addresses the content it was created for.

    Hash mismatches are soft by default: a reflow (font or size change) can
    legitimately alter the text at an anchor that did not move. Strict mode
    treats any mismatch as invalid.
    """

    def __init__(
        self,
        resolver: Optional[LocationResolver] = None,
        strict: bool = False,
        fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH,
    ) -> None:
        self.resolver = resolver or LocationResolver()
        self.strict = strict
        self.fingerprint_length = fingerprint_length

    def validate(self, location: Location, tree: DocumentTree, strict: Optional[bool] = None) -> bool:
        """True when ``location`` resolves and passes the drift check for the mode."""
        return self.check(location, tree, strict).valid

    def check(self, location: Location, tree: DocumentTree, strict: Optional[bool] = None) -> ValidationResult:
        strict_mode = self.strict if strict is None else strict

        if not location.chapter_id:
            return ValidationResult(resolved=False, drifted=False, valid=False)

        node = self.resolver.resolve(location, tree)
        if node is None:
            logger.info(
                "location_unresolved",
                chapter_id=location.chapter_id,
                path_length=len(location.path),
            )
            return ValidationResult(resolved=False, drifted=False, valid=False)

        if location.content_hash is None:
            return ValidationResult(resolved=True, drifted=False, valid=True)

        current_hash = compute_fingerprint(tree.text_of(node), self.fingerprint_length)
        if current_hash == location.content_hash:
            return ValidationResult(resolved=True, drifted=False, valid=True)

        warning = DriftWarning(location.chapter_id, location.content_hash, current_hash)
        logger.warning(
            "location_content_drift",
            chapter_id=location.chapter_id,
            expected=location.content_hash,
            actual=current_hash,
            strict=strict_mode,
        )
        return ValidationResult(resolved=True, drifted=True, valid=not strict_mode, warning=warning)
