"""Typed failures raised by the rule resolution and scheduling engine."""

from typing import Iterable, Optional


class RuleEngineError(Exception):
    """Base class for every typed engine failure."""


class InvalidTokenError(RuleEngineError, ValueError):
    """Raised when an interval token does not match the token grammar."""

    def __init__(self, token: object, reason: str = "does not match ^[TD][+-]\\d+$"):
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid interval token {token!r}: {reason}")


class InvalidRuleError(RuleEngineError, ValueError):
    """Raised when a rule record cannot be turned into a typed Rule."""

    def __init__(self, rule_id: Optional[str], reason: str):
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(f"Invalid rule {rule_id!r}: {reason}")


class InvalidEventError(RuleEngineError, ValueError):
    """Raised for an unknown folder trigger event type."""

    def __init__(self, event_type: object):
        self.event_type = event_type
        super().__init__(f"Unknown folder trigger event type: {event_type!r}")


class TemplateError(RuleEngineError, ValueError):
    """Base class for path/string template defects."""


class MalformedTemplateError(TemplateError):
    """Raised for template syntax that cannot be parsed (e.g. unterminated '{{')."""

    def __init__(self, template: str, position: int, reason: str = "unterminated placeholder"):
        self.template = template
        self.position = position
        self.reason = reason
        super().__init__(f"Malformed template at offset {position}: {reason} in {template!r}")


class UnresolvedVariableError(TemplateError):
    """Raised when placeholders remain without a value in the context."""

    def __init__(self, names: Iterable[str], template: str = ""):
        self.names = sorted(set(names))
        self.template = template
        super().__init__(f"Unresolved template variables: {', '.join(self.names)}")


__all__ = [
    "RuleEngineError",
    "InvalidTokenError",
    "InvalidRuleError",
    "InvalidEventError",
    "TemplateError",
    "MalformedTemplateError",
    "UnresolvedVariableError",
]
