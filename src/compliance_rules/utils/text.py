"""
Text utilities for compliance_rules.

- Stable hashing for deterministic log and event ids
"""

import hashlib
from typing import List


def stable_hash(parts: List[str], length: int = 16) -> str:
    """
    Generate a stable hash from a list of string parts.

    The same inputs always produce the same hash, so re-running a sweep or a
    folder trigger yields the same ids and downstream consumers can
    deduplicate.

    Args:
        parts: List of strings to hash together.
        length: Number of hex characters to return (max 64 for SHA256).

    Returns:
        Hex string of specified length.
    """
    combined = "|".join(parts)
    full_hash = hashlib.sha256(combined.encode("utf-8")).hexdigest()
    return full_hash[:length]
