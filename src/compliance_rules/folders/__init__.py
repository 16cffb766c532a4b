"""
Folder auto-creation for compliance_rules.

Provides the folder rule trigger engine for taxonomy creation events.
"""

from .trigger import (
    FolderRuleTriggerEngine,
    coerce_event_type,
    describe_event,
    target_for_event,
    trigger_folder_rules,
)

__all__ = [
    "FolderRuleTriggerEngine",
    "coerce_event_type",
    "describe_event",
    "target_for_event",
    "trigger_folder_rules",
]
