"""Upstream text normalization."""
from nova.normalization.references import (
    CANONICAL_TAG,
    REFERENCE_PATTERNS,
    ReferencePattern,
    canonical_reference,
    normalize_message,
    normalize_steps,
    split_canonical_reference,
)

__all__ = [
    "CANONICAL_TAG",
    "REFERENCE_PATTERNS",
    "ReferencePattern",
    "canonical_reference",
    "normalize_message",
    "normalize_steps",
    "split_canonical_reference",
]
