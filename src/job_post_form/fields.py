from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from job_post_form.models import JobPostDraft

if TYPE_CHECKING:
    from job_post_form.submission import JobPostForm


class FieldName(StrEnum):
    TITLE = "title"
    COMPANY = "company"
    DESCRIPTION = "description"
    LOCATION = "location"
    REQUISITES = "requisites"
    STACK = "stack"
    URL = "url"
    SOURCE = "source"


MULTI_VALUE_FIELDS = frozenset({FieldName.REQUISITES, FieldName.STACK})


class SetValue(BaseModel):
    """Replace the value of one draft field."""

    model_config = ConfigDict(frozen=True)

    field: FieldName
    value: Any


class ToggleOption(BaseModel):
    """Flip membership of one option in a multi-value field."""

    model_config = ConfigDict(frozen=True)

    field: FieldName
    option_id: str | int


FieldChange = SetValue | ToggleOption


def apply_change(draft: JobPostDraft, change: FieldChange) -> JobPostDraft:
    """
    Return a new draft with the change applied. The given draft is left untouched.

    Only the changed field is touched; nothing derived (like the blob) is
    recomputed here. A value of the wrong type raises pydantic.ValidationError.
    """
    field = FieldName(change.field)

    if isinstance(change, ToggleOption):
        if field not in MULTI_VALUE_FIELDS:
            raise ValueError(f"Field '{field}' does not hold options")
        selected = set(getattr(draft, field) or ())
        option_id = str(change.option_id)
        if option_id in selected:
            selected.remove(option_id)
        else:
            selected.add(option_id)
        return _replace(draft, field, selected)

    value = change.value
    if field in MULTI_VALUE_FIELDS and value is not None:
        if isinstance(value, str):
            raise ValueError(f"Field '{field}' expects a collection of options, got a string")
        value = {str(item) for item in value}
    return _replace(draft, field, value)


def _replace(draft: JobPostDraft, field: FieldName, value: Any) -> JobPostDraft:
    """Rebuild the draft so the new value goes through the same checks as any other input."""
    return JobPostDraft.model_validate({**draft.model_dump(), field.value: value})


class FieldBinding:
    """
    Value accessor, change handler and error state for one field of a form.
    UI code attaches to a binding without knowing the validation rules.
    """

    def __init__(self, form: "JobPostForm", field: FieldName) -> None:
        self.form = form
        self.name = FieldName(field)

    @property
    def multiple(self) -> bool:
        return self.name in MULTI_VALUE_FIELDS

    @property
    def value(self) -> Any:
        return getattr(self.form.draft, self.name)

    @property
    def error(self) -> str | None:
        return self.form.errors.get(self.name.value)

    def on_change(self, value: Any) -> None:
        self.form.change(self.name, value)

    def toggle(self, option_id: str | int) -> None:
        self.form.toggle(self.name, option_id)

    def select(self, option_id: str | int) -> None:
        """Add an option; selecting one that is already selected is a no-op."""
        if not self.is_selected(option_id):
            self.toggle(option_id)

    def deselect(self, option_id: str | int) -> None:
        if self.is_selected(option_id):
            self.toggle(option_id)

    def is_selected(self, option_id: str | int) -> bool:
        if not self.multiple:
            raise ValueError(f"Field '{self.name}' does not hold options")
        return str(option_id) in (self.value or ())
