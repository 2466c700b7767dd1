from job_post_form.fields import FieldName
from job_post_form.models import JobPostDraft

MAX_STACK_SIZE = 5
MAX_STACK_MESSAGE = f"Select no more than {MAX_STACK_SIZE} technologies"

REQUIRED_TEXT_FIELDS = (
    FieldName.TITLE,
    FieldName.COMPANY,
    FieldName.DESCRIPTION,
    FieldName.LOCATION,
    FieldName.URL,
    FieldName.SOURCE,
)


def required_message(field: str) -> str:
    return f"{field} is a required field"


def _is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def validate_draft(draft: JobPostDraft) -> dict[str, str]:
    """
    Check a draft snapshot against the required-field rules.

    Returns a mapping of field name to message; an empty mapping means the
    draft can be submitted. Never raises.
    """
    errors: dict[str, str] = {}

    for field in REQUIRED_TEXT_FIELDS:
        if not _is_present(getattr(draft, field)):
            errors[field.value] = required_message(field.value)

    if draft.requisites is None:
        errors[FieldName.REQUISITES.value] = required_message(FieldName.REQUISITES.value)

    if not draft.stack:
        errors[FieldName.STACK.value] = required_message(FieldName.STACK.value)
    elif len(draft.stack) > MAX_STACK_SIZE:
        errors[FieldName.STACK.value] = MAX_STACK_MESSAGE

    return errors


def is_valid(draft: JobPostDraft) -> bool:
    return not validate_draft(draft)
