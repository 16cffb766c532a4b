"""
Folder rule trigger engine.

When a compliance head, sub-head, entity or document type is created, every
active folder rule whose trigger is that event and whose matcher accepts the
event target yields one FolderCreationRequest. Rules are applied most specific
first, then by rule id. Path templates are resolved against the event context
merged with clock-derived variables (year, month, quarter), which override any
same-named context keys.

A template failure only fails its own request; sibling rules are still applied.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional, Union

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import (
    EVENT_MAX_SCOPE,
    TRIGGER_ALIASES,
    VAR_COMPLIANCE_HEAD,
    VAR_DOCUMENT_TYPE,
    VAR_ENTITY,
    VAR_SUB_HEAD,
    FolderEventType,
    RuleCategory,
    Scope,
)
from compliance_rules.errors import InvalidEventError, TemplateError
from compliance_rules.parsing.templates import resolve_template
from compliance_rules.resolution.hierarchy import match_rules
from compliance_rules.scheduling.dates import implicit_variables
from compliance_rules.schemas.rule_contract import (
    FolderCreationLogRow,
    FolderCreationOutcome,
    FolderCreationRequest,
    FolderPayload,
    ResolutionTarget,
    Rule,
    RuleTable,
)
from compliance_rules.utils.text import stable_hash

logger = logging.getLogger(__name__)

# Context variable naming the item each event creates
EVENT_SUBJECT_VARIABLE = {
    FolderEventType.COMPLIANCE_HEAD_CREATED: VAR_COMPLIANCE_HEAD,
    FolderEventType.SUB_HEAD_CREATED: VAR_SUB_HEAD,
    FolderEventType.ENTITY_CREATED: VAR_ENTITY,
    FolderEventType.DOCUMENT_TYPE_CREATED: VAR_DOCUMENT_TYPE,
}

EVENT_LABELS = {
    FolderEventType.COMPLIANCE_HEAD_CREATED: "compliance head",
    FolderEventType.SUB_HEAD_CREATED: "sub-head",
    FolderEventType.ENTITY_CREATED: "entity",
    FolderEventType.DOCUMENT_TYPE_CREATED: "document type",
}


def coerce_event_type(event_type: Union[FolderEventType, str]) -> FolderEventType:
    """Accept enum members, event names and dashboard trigger names."""
    if isinstance(event_type, FolderEventType):
        return event_type
    key = str(event_type).strip().lower()
    if key in TRIGGER_ALIASES:
        return TRIGGER_ALIASES[key]
    try:
        return FolderEventType(key)
    except ValueError:
        raise InvalidEventError(event_type) from None


def target_for_event(
    event_type: FolderEventType,
    event_context: Mapping[str, object],
) -> ResolutionTarget:
    """
    Derive the resolution target for an event.

    The event type bounds the deepest scope the target exposes: a new
    compliance head has no sub-head, so sub-head-scoped rules never match it.
    """
    def _value(name: str) -> Optional[str]:
        value = event_context.get(name)
        return None if value is None else str(value)

    max_scope = EVENT_MAX_SCOPE[event_type]
    return ResolutionTarget(
        category_name=_value(VAR_COMPLIANCE_HEAD),
        subcategory_name=_value(VAR_SUB_HEAD) if max_scope is Scope.SUBCATEGORY else None,
        entity_name=_value(VAR_ENTITY),
        document_type_name=_value(VAR_DOCUMENT_TYPE),
    )


class FolderRuleTriggerEngine:
    """
    Evaluates folder rules against taxonomy creation events.

    Args:
        table: Rule table snapshot.
        config: Engine configuration (month/quarter label formats).
        clock: Returns the evaluation date when ``as_of`` is not given.
    """

    def __init__(
        self,
        table: RuleTable,
        config: EngineConfig = DEFAULT_CONFIG,
        clock: Callable[[], date] = date.today,
    ):
        self.table = table
        self.config = config
        self.clock = clock

    def matching_rules(
        self,
        event_type: Union[FolderEventType, str],
        event_context: Mapping[str, object],
    ) -> List[Rule]:
        """Active folder rules triggered by the event, most specific first."""
        event = coerce_event_type(event_type)
        target = target_for_event(event, event_context)
        return match_rules(
            RuleCategory.FOLDER,
            self.table,
            target,
            predicate=lambda rule: rule.payload.trigger is event,
        )

    def on_event(
        self,
        event_type: Union[FolderEventType, str],
        event_context: Mapping[str, object],
        as_of: Optional[date] = None,
    ) -> List[FolderCreationOutcome]:
        """
        Apply every matching folder rule to one event.

        Returns:
            One outcome per matched rule, in rule order. Each outcome holds
            either a FolderCreationRequest or the TemplateError that failed it.
        """
        event = coerce_event_type(event_type)
        as_of = as_of or self.clock()
        variables: Dict[str, object] = {
            str(key): value for key, value in event_context.items() if value is not None
        }
        variables.update(implicit_variables(as_of, self.config))

        outcomes: List[FolderCreationOutcome] = []
        for rule in self.matching_rules(event, event_context):
            payload: FolderPayload = rule.payload
            try:
                path = resolve_template(payload.path_template, variables)
            except TemplateError as exc:
                logger.warning(f"Folder rule {rule.rule_id} failed for {event.value}: {exc}")
                outcomes.append(FolderCreationOutcome(rule_id=rule.rule_id, error=exc))
                continue
            outcomes.append(FolderCreationOutcome(
                rule_id=rule.rule_id,
                request=FolderCreationRequest(
                    path=path,
                    access_level=payload.access_level,
                    default_assignees=payload.default_assignees,
                    trigger_rule_id=rule.rule_id,
                ),
            ))

        succeeded = sum(1 for outcome in outcomes if outcome.ok)
        logger.info(
            f"{event.value}: {len(outcomes)} folder rules matched, "
            f"{succeeded} requests, {len(outcomes) - succeeded} failed"
        )
        return outcomes

    def requests_for_event(
        self,
        event_type: Union[FolderEventType, str],
        event_context: Mapping[str, object],
        as_of: Optional[date] = None,
    ) -> List[FolderCreationRequest]:
        """Only the successful requests of :meth:`on_event`."""
        return [
            outcome.request
            for outcome in self.on_event(event_type, event_context, as_of=as_of)
            if outcome.ok
        ]

    def creation_log(
        self,
        event_type: Union[FolderEventType, str],
        event_context: Mapping[str, object],
        outcomes: List[FolderCreationOutcome],
        created_at: str,
    ) -> List[FolderCreationLogRow]:
        """
        Render outcomes as folder creation log rows.

        ``log_id`` is a stable hash of the rule, path, trigger and timestamp, so
        replaying the same event at the same time yields the same ids.
        """
        event = coerce_event_type(event_type)
        trigger_data = describe_event(event, event_context)
        rows: List[FolderCreationLogRow] = []
        for outcome in outcomes:
            rule = self.table.get(outcome.rule_id)
            path = outcome.request.path if outcome.request is not None else None
            rows.append(FolderCreationLogRow(
                log_id=stable_hash([outcome.rule_id, path or "", trigger_data, created_at]),
                rule_id=outcome.rule_id,
                rule_name=rule.name if rule is not None else "",
                folder_path=path,
                trigger_data=trigger_data,
                created_at=created_at,
                status="success" if outcome.ok else "error",
                error=str(outcome.error) if outcome.error is not None else None,
            ))
        return rows


def describe_event(event_type: FolderEventType, event_context: Mapping[str, object]) -> str:
    """Short description such as "GSTR-3B sub-head created"."""
    subject = event_context.get(EVENT_SUBJECT_VARIABLE[event_type])
    label = EVENT_LABELS[event_type]
    if subject is None:
        return f"{label} created"
    return f"{subject} {label} created"


def trigger_folder_rules(
    event_type: Union[FolderEventType, str],
    event_context: Mapping[str, object],
    table: RuleTable,
    as_of: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[FolderCreationOutcome]:
    """Functional form of :meth:`FolderRuleTriggerEngine.on_event`."""
    return FolderRuleTriggerEngine(table, config=config).on_event(
        event_type, event_context, as_of=as_of
    )


__all__ = [
    "FolderRuleTriggerEngine",
    "coerce_event_type",
    "target_for_event",
    "describe_event",
    "trigger_folder_rules",
]
