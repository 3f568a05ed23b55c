"""
Prompt construction.

Folds a form state into the single instruction string handed to a
generation capability. The output depends only on the state's entry
order and values, so the same inputs always give the same prompt.
"""

from collections.abc import Collection

from luxia_studio.models.field_schema import ServiceDefinition
from luxia_studio.models.form_state import FileHandle, FormState

ADDITIONAL_INSTRUCTIONS_LABEL = "Additional instructions"


def build_prompt(
    state: FormState,
    excluded: Collection[str] = frozenset(),
    *,
    description: str | None = None,
    comments: str | None = None,
) -> str:
    """
    Build the prompt for a form state.

    Args:
        state: Current form values, iterated in schema order.
        excluded: Field names that never produce a "<name>: <value>." fragment.
        description: Name of the field appended verbatim after the fragments.
        comments: Name of the field appended as additional instructions.

    Returns:
        The trimmed prompt string.
    """
    prompt = ""
    for name, value in state.items():
        if name in excluded or not value or isinstance(value, FileHandle):
            continue
        if isinstance(value, tuple):
            prompt += f"{name}: {', '.join(value)}. "
        else:
            prompt += f"{name}: {value}. "

    if description is not None:
        prompt += str(state.get(description) or "")

    if comments is not None and state.get(comments):
        prompt += f"\n\n{ADDITIONAL_INSTRUCTIONS_LABEL}: {state[comments]}"

    return prompt.strip()


def excluded_fields(service: ServiceDefinition) -> frozenset[str]:
    """Fields handled outside the labelled fragments: description, comments, uploads."""
    names = {field.name for field in service.upload_fields}
    for special in (service.description_field, service.comments_field):
        if special is not None:
            names.add(special.name)
    return frozenset(names)


def build_service_prompt(service: ServiceDefinition, state: FormState) -> str:
    """Build the prompt using the roles declared by the service's fields."""
    description = service.description_field
    comments = service.comments_field
    return build_prompt(
        state,
        excluded_fields(service),
        description=description.name if description else None,
        comments=comments.name if comments else None,
    )
