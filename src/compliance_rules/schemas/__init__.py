"""
Schema modules for rule engine contracts.

This package hosts the frozen dataclasses that define the contracts between
the rule store, the resolution/scheduling core, and downstream consumers.
"""

__all__ = [
    "rule_contract",
]
