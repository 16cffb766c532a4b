"""
Template variable resolution for folder paths and notification text.

Templates use ``{{name}}`` placeholders:

    "/{{compliance_head}}/{{year}}/{{month}}"

Resolution is strict and all-or-nothing. The template is fully tokenized before
any substitution, so malformed syntax (an unterminated ``{{``, a stray ``}}``,
an empty or invalid name) fails with MalformedTemplateError and never yields a
partially resolved string. Placeholders without a value fail with
UnresolvedVariableError naming every missing variable, so a folder is never
created with a literal ``{{...}}`` in its path.
"""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Tuple, Union

from compliance_rules.errors import MalformedTemplateError, UnresolvedVariableError

OPEN = "{{"
CLOSE = "}}"

VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# A parsed template is a list of literal strings and (name, offset) placeholders.
Segment = Union[str, Tuple[str, int]]


def parse_template(template: str) -> List[Segment]:
    """
    Split a template into literal text and placeholder segments.

    Raises:
        MalformedTemplateError: On unterminated/stray delimiters or invalid names.
    """
    if not isinstance(template, str):
        raise MalformedTemplateError(str(template), 0, "template must be a string")

    segments: List[Segment] = []
    pos = 0
    length = len(template)
    while pos < length:
        open_at = template.find(OPEN, pos)
        close_at = template.find(CLOSE, pos)
        if close_at != -1 and (open_at == -1 or close_at < open_at):
            raise MalformedTemplateError(template, close_at, "'}}' without matching '{{'")
        if open_at == -1:
            segments.append(template[pos:])
            break
        if open_at > pos:
            segments.append(template[pos:open_at])
        end = template.find(CLOSE, open_at + len(OPEN))
        if end == -1:
            raise MalformedTemplateError(template, open_at)
        raw_name = template[open_at + len(OPEN):end]
        name = raw_name.strip()
        if not VARIABLE_NAME.fullmatch(name):
            raise MalformedTemplateError(
                template, open_at, f"invalid variable name {raw_name!r}"
            )
        segments.append((name, open_at))
        pos = end + len(CLOSE)
    return segments


def extract_variables(template: str) -> List[str]:
    """Placeholder names in first-appearance order, without duplicates."""
    seen: List[str] = []
    for segment in parse_template(template):
        if isinstance(segment, tuple) and segment[0] not in seen:
            seen.append(segment[0])
    return seen


def resolve_template(template: str, context: Mapping[str, object]) -> str:
    """
    Substitute every ``{{name}}`` with ``context[name]``.

    Values are converted with ``str()``; a ``None`` value counts as missing.
    Substituted values are not re-scanned for placeholders.

    Args:
        template: Template text.
        context: Variable values.

    Returns:
        The fully resolved string.

    Raises:
        MalformedTemplateError: If the template syntax is invalid.
        UnresolvedVariableError: If any placeholder has no value; lists all
            such names.

    Example:
        >>> resolve_template("/{{compliance_head}}/{{year}}", {"compliance_head": "GST", "year": "2025"})
        '/GST/2025'
    """
    segments = parse_template(template)
    missing = [
        segment[0]
        for segment in segments
        if isinstance(segment, tuple) and _lookup(context, segment[0]) is None
    ]
    if missing:
        raise UnresolvedVariableError(missing, template=template)

    parts = []
    for segment in segments:
        if isinstance(segment, tuple):
            parts.append(str(_lookup(context, segment[0])))
        else:
            parts.append(segment)
    return "".join(parts)


def _lookup(context: Mapping[str, object], name: str) -> Optional[object]:
    return context.get(name) if context is not None else None


__all__ = [
    "parse_template",
    "extract_variables",
    "resolve_template",
]
