"""
Utility modules for compliance_rules.

Submodules:
    text: Stable hashing for deterministic ids
    serialize: Record/JSON/DataFrame-row normalization into contract types
"""

from compliance_rules.utils.text import stable_hash
from compliance_rules.utils.serialize import (
    is_missing,
    normalize_cell_list,
    parse_date,
    rule_from_record,
    load_rule_table,
    target_from_record,
)

__all__ = [
    # Text utilities
    "stable_hash",
    # Serialization utilities
    "is_missing",
    "normalize_cell_list",
    "parse_date",
    "rule_from_record",
    "load_rule_table",
    "target_from_record",
]
