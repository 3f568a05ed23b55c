"""
Data models for LUXIA Studio.

This module contains:
- Field and service schemas
- Form state snapshots and form events
- Generation results
"""

from luxia_studio.models.field_schema import (
    FieldKind,
    FieldRole,
    FieldSchema,
    ServiceDefinition,
    ServiceKind,
)
from luxia_studio.models.form_state import (
    FieldChanged,
    FileHandle,
    FormState,
    FormStore,
    OptionToggled,
    apply_event,
    initialize,
    is_empty,
    set_field,
    toggle_option,
)
from luxia_studio.models.generation_result import (
    GenerationResult,
    MediaKind,
    ResultSet,
    download_name,
)

__all__ = [
    # Schemas
    "FieldKind",
    "FieldRole",
    "FieldSchema",
    "ServiceDefinition",
    "ServiceKind",
    # Form state
    "FieldChanged",
    "FileHandle",
    "FormState",
    "FormStore",
    "OptionToggled",
    "apply_event",
    "initialize",
    "is_empty",
    "set_field",
    "toggle_option",
    # Results
    "GenerationResult",
    "MediaKind",
    "ResultSet",
    "download_name",
]
