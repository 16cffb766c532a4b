"""
Shared constants across compliance_rules modules.

This module is the single source of truth for:
- Scope constants (rule specificity levels)
- Rule category constants
- Folder trigger event types
- Retention units/actions and folder access levels
- Template variable names
"""

from enum import Enum


# =============================================================================
# SCOPES
# =============================================================================
# Specificity levels a rule can be attached at, least specific first.

class Scope(Enum):
    """Level of the compliance taxonomy a rule is attached to."""
    GLOBAL = "global"                 # Applies to everything
    CATEGORY = "category"             # Compliance head (e.g. GST)
    SUBCATEGORY = "subcategory"       # Sub-head (e.g. GSTR-3B)


# Matcher value that matches any target value at its scope
WILDCARD = "*"

# Aliases used by the dashboard rule editors
SCOPE_ALIASES = {
    "global": Scope.GLOBAL,
    "category": Scope.CATEGORY,
    "compliance-head": Scope.CATEGORY,
    "subcategory": Scope.SUBCATEGORY,
    "sub-head": Scope.SUBCATEGORY,
}


# =============================================================================
# RULE CATEGORIES
# =============================================================================

class RuleCategory(Enum):
    """Which engine feature a rule configures."""
    REMINDER = "reminder"
    RETENTION = "retention"
    FOLDER = "folder"


# =============================================================================
# FOLDER TRIGGERS
# =============================================================================

class FolderEventType(Enum):
    """Taxonomy/entity events that can trigger folder creation."""
    COMPLIANCE_HEAD_CREATED = "compliance-head-created"
    SUB_HEAD_CREATED = "sub-head-created"
    ENTITY_CREATED = "entity-created"
    DOCUMENT_TYPE_CREATED = "document-type-created"


# Dashboard trigger names -> event types
TRIGGER_ALIASES = {
    "compliance-head": FolderEventType.COMPLIANCE_HEAD_CREATED,
    "sub-head": FolderEventType.SUB_HEAD_CREATED,
    "entity": FolderEventType.ENTITY_CREATED,
    "document-type": FolderEventType.DOCUMENT_TYPE_CREATED,
}

# Deepest scope a target derived from each event can satisfy
EVENT_MAX_SCOPE = {
    FolderEventType.COMPLIANCE_HEAD_CREATED: Scope.CATEGORY,
    FolderEventType.SUB_HEAD_CREATED: Scope.SUBCATEGORY,
    FolderEventType.ENTITY_CREATED: Scope.SUBCATEGORY,
    FolderEventType.DOCUMENT_TYPE_CREATED: Scope.SUBCATEGORY,
}


class AccessLevel(Enum):
    """Access level assigned to an auto-created folder."""
    PUBLIC = "public"                 # All users can access
    RESTRICTED = "restricted"         # Specific users only
    PRIVATE = "private"               # Admin only


# =============================================================================
# RETENTION
# =============================================================================

class RetentionUnit(Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class RetentionAction(Enum):
    ARCHIVE = "archive"
    DELETE = "delete"


# =============================================================================
# SCHEDULED EVENT KINDS
# =============================================================================

EVENT_KIND_REMINDER = "reminder"
EVENT_KIND_ARCHIVE = RetentionAction.ARCHIVE.value
EVENT_KIND_DELETE = RetentionAction.DELETE.value


# =============================================================================
# TEMPLATE VARIABLES
# =============================================================================

VAR_COMPLIANCE_HEAD = "compliance_head"
VAR_SUB_HEAD = "sub_head"
VAR_ENTITY = "entity"
VAR_DOCUMENT_TYPE = "document_type"
VAR_USER_NAME = "user_name"
VAR_YEAR = "year"
VAR_MONTH = "month"
VAR_QUARTER = "quarter"

# Variables derived from the evaluation clock, never from the event
IMPLICIT_VARIABLES = (VAR_YEAR, VAR_MONTH, VAR_QUARTER)

FOLDER_VARIABLES = (
    VAR_COMPLIANCE_HEAD,
    VAR_SUB_HEAD,
    VAR_ENTITY,
    VAR_YEAR,
    VAR_MONTH,
    VAR_QUARTER,
    VAR_DOCUMENT_TYPE,
    VAR_USER_NAME,
)
