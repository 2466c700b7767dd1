import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from job_post_form.fields import FieldBinding, FieldName, SetValue, ToggleOption, apply_change
from job_post_form.models import CuratorIdentity, JobPostDraft, JobPostRecord, JobStatus, Option
from job_post_form.options import DEFAULT_REQUISITES_OPTIONS, DEFAULT_STACK_OPTIONS, OptionSource
from job_post_form.slug import DEFAULT_LOCALE, blob_for, check_locale
from job_post_form.validation import validate_draft

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Cadastrado com sucesso"
SUBMITTING_MESSAGE = "Cadastrando..."
MISSING_CURATOR_MESSAGE = "A signed-in curator is required to post a job."
NOT_A_CURATOR_MESSAGE = "Only curators can post jobs."

CreateJob = Callable[[JobPostRecord], Awaitable[str]]


class MissingCuratorError(ValueError):
    """Raised when a record would be assembled without an owning curator."""


class SubmissionState(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    ASSEMBLING = "assembling"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmissionOutcome(StrEnum):
    SUCCEEDED = "succeeded"
    REJECTED = "rejected"
    FAILED = "failed"
    PRECONDITION_FAILED = "precondition_failed"
    BUSY = "busy"


class SubmissionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: SubmissionOutcome
    errors: dict[str, str] = Field(default_factory=dict)
    message: str = ""
    record: JobPostRecord | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == SubmissionOutcome.SUCCEEDED


def resolve_stack(
    tags: Iterable[str], stack_options: OptionSource | None = None
) -> list[Option]:
    """
    Map selected stack tags to their options, ordered by label.
    Tags missing from the options are kept as-is, with the tag as label.
    """
    resolved = []
    for tag in tags:
        option = stack_options.get(tag) if stack_options is not None else None
        resolved.append(option or Option(id=tag, label=tag))
    return sorted(resolved, key=lambda option: (option.label.lower(), str(option.id)))


def assemble_record(
    draft: JobPostDraft,
    curator: CuratorIdentity | None,
    now: datetime,
    indicated_by: str | int | None = None,
    company_label: str | None = None,
    locale: str = DEFAULT_LOCALE,
    stack_options: OptionSource | None = None,
) -> JobPostRecord:
    """
    Build the immutable record for a validated draft.

    `now` is used for both timestamps and for the blob date parts.
    `company_label` replaces the raw company value in the blob when the
    company was picked from a list of identifiers. Stack tags found in
    `stack_options` are sent with the option's own id and appear by label
    in the blob.
    """
    if curator is None:
        raise MissingCuratorError(MISSING_CURATOR_MESSAGE)

    stack = resolve_stack(draft.stack or (), stack_options)
    company = company_label if company_label is not None else str(draft.company)

    return JobPostRecord(
        title=draft.title,
        company=draft.company,
        description=draft.description,
        location=draft.location,
        requisites=tuple(sorted(draft.requisites or ())),
        stack=tuple(option.id for option in stack),
        url=draft.url,
        source=draft.source,
        status=JobStatus.OPEN,
        created_at=now,
        modified_at=now,
        curator=curator.id,
        indicated_by=indicated_by,
        blob=blob_for(
            draft.title, [option.label for option in stack], company, curator.name, now, locale
        ),
    )


def _local_now() -> datetime:
    return datetime.now().astimezone()


class JobPostForm:
    """
    One job post form instance: the draft being edited, its field errors,
    the status messages shown to the user, and the submit lifecycle.

    Only one submission can be in flight at a time; a second `submit()` while
    the create call is pending is ignored.
    """

    def __init__(
        self,
        create_job: CreateJob,
        curator: CuratorIdentity | None,
        indicated_by: str | int | None = None,
        requisites_options: OptionSource | None = None,
        stack_options: OptionSource | None = None,
        company_options: OptionSource | None = None,
        clock: Callable[[], datetime] = _local_now,
        locale: str = DEFAULT_LOCALE,
        timeout: float | None = None,
    ) -> None:
        self.create_job = create_job
        self.curator = curator
        self.indicated_by = indicated_by
        if requisites_options is None:
            requisites_options = OptionSource("requisites", DEFAULT_REQUISITES_OPTIONS)
        if stack_options is None:
            stack_options = OptionSource("stack", DEFAULT_STACK_OPTIONS)
        if company_options is None:
            company_options = OptionSource("company")
        self.requisites_options = requisites_options
        self.stack_options = stack_options
        self.company_options = company_options
        self.clock = clock
        self.locale = check_locale(locale)
        self.timeout = timeout

        self.draft = JobPostDraft()
        self.errors: dict[str, str] = {}
        self.form_error = ""
        self.backend_message = ""
        self.state = SubmissionState.IDLE
        self.trace: list[SubmissionState] = []
        self._in_flight = False

    # --- Field binding ---

    def bind(self, field: FieldName | str) -> FieldBinding:
        return FieldBinding(self, FieldName(field))

    def change(self, field: FieldName | str, value: object) -> None:
        self.draft = apply_change(self.draft, SetValue(field=FieldName(field), value=value))

    def toggle(self, field: FieldName | str, option_id: str | int) -> None:
        field = FieldName(field)
        source = self._options_for(field)
        if source is not None and len(source) and not source.contains(option_id):
            raise ValueError(f"Unknown {field} option: {option_id!r}")
        self.draft = apply_change(self.draft, ToggleOption(field=field, option_id=option_id))

    def _options_for(self, field: FieldName) -> OptionSource | None:
        if field == FieldName.REQUISITES:
            return self.requisites_options
        if field == FieldName.STACK:
            return self.stack_options
        if field == FieldName.COMPANY:
            return self.company_options
        return None

    def company_label(self) -> str:
        """Label of the selected company, or the free-text company as typed."""
        company = self.draft.company
        if company is None:
            return ""
        return self.company_options.label_for(company) or str(company)

    def reset(self) -> None:
        """Clear the draft and every message shown by the form."""
        self.draft = JobPostDraft()
        self.errors = {}
        self.form_error = ""

    @property
    def is_submitting(self) -> bool:
        return self._in_flight

    # --- Submission ---

    def _set_state(self, state: SubmissionState) -> None:
        logger.debug(f"Job post form: {self.state} -> {state}")
        self.state = state
        self.trace.append(state)

    async def submit(self) -> SubmissionResult:
        """Validate the current draft, assemble the record and hand it to `create_job`."""
        if self._in_flight:
            logger.warning("A job post submission is already in progress. Ignoring.")
            return SubmissionResult(outcome=SubmissionOutcome.BUSY, message=self.backend_message)

        self._in_flight = True
        self.trace = []
        try:
            return await self._submit()
        finally:
            self._in_flight = False
            self._set_state(SubmissionState.IDLE)

    async def _submit(self) -> SubmissionResult:
        self._set_state(SubmissionState.VALIDATING)
        snapshot = self.draft.model_copy(deep=True)

        errors = validate_draft(snapshot)
        if errors:
            self.errors = errors
            self.backend_message = ""
            self._set_state(SubmissionState.REJECTED)
            logger.info(f"Job post rejected by validation: {sorted(errors)}")
            return SubmissionResult(outcome=SubmissionOutcome.REJECTED, errors=errors)
        self.errors = {}

        self._set_state(SubmissionState.ASSEMBLING)
        if self.curator is not None and not self.curator.is_curator:
            return self._precondition_failed(NOT_A_CURATOR_MESSAGE)
        try:
            record = assemble_record(
                snapshot,
                self.curator,
                now=self.clock(),
                indicated_by=self.indicated_by,
                company_label=self.company_label(),
                locale=self.locale,
                stack_options=self.stack_options,
            )
        except MissingCuratorError as e:
            return self._precondition_failed(str(e))
        except ValidationError as e:
            self.form_error = f"The job post could not be assembled: {e}"
            self._set_state(SubmissionState.FAILED)
            logger.error(self.form_error)
            return SubmissionResult(outcome=SubmissionOutcome.FAILED, message=self.form_error)
        self.form_error = ""

        self._set_state(SubmissionState.SUBMITTING)
        self.backend_message = SUBMITTING_MESSAGE
        logger.info(f"Submitting job post '{record.title}' ({record.blob})")
        message = await self._create(record)
        self.backend_message = message

        if message == SUCCESS_MESSAGE:
            self._set_state(SubmissionState.SUCCEEDED)
            self.reset()
            logger.info(f"Job post '{record.title}' created.")
            return SubmissionResult(
                outcome=SubmissionOutcome.SUCCEEDED, message=message, record=record
            )

        self._set_state(SubmissionState.FAILED)
        logger.error(f"Failed to create job post '{record.title}': {message}")
        return SubmissionResult(outcome=SubmissionOutcome.FAILED, message=message, record=record)

    async def _create(self, record: JobPostRecord) -> str:
        """Run the create call, turning exceptions and timeouts into a failure message."""
        try:
            if self.timeout is None:
                return await self.create_job(record)
            return await asyncio.wait_for(self.create_job(record), timeout=self.timeout)
        except TimeoutError as e:
            if self.timeout is not None:
                return f"The create request timed out after {self.timeout}s."
            return str(e) or type(e).__name__
        except Exception as e:
            return str(e) or type(e).__name__

    def _precondition_failed(self, message: str) -> SubmissionResult:
        self.form_error = message
        self._set_state(SubmissionState.FAILED)
        logger.error(f"Job post not submitted: {message}")
        return SubmissionResult(outcome=SubmissionOutcome.PRECONDITION_FAILED, message=message)
