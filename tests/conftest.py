import os
from datetime import UTC, datetime

import pytest

# Set environment variables for tests before any imports happen
os.environ["JOBPOST_API_URL"] = "https://api.example.com"
os.environ["JOBPOST_SUBMIT_TIMEOUT"] = "30"
os.environ["JOBPOST_BLOB_LOCALE"] = "pt-BR"

from job_post_form.models import CuratorIdentity, JobPostDraft  # noqa: E402

# Wednesday, so the blob weekday number is 4
FIXED_NOW = datetime(2024, 3, 13, 10, 30, tzinfo=UTC)


@pytest.fixture
def curator():
    """A reusable signed-in curator."""
    return CuratorIdentity(id=7, name="Jane")


@pytest.fixture
def valid_draft():
    """A draft that passes validation."""
    return JobPostDraft(
        title="Backend Engineer",
        company="Acme",
        description="Build and run our APIs.",
        location="Remote",
        requisites={"mulher"},
        stack={"rust", "go"},
        url="https://example.com/jobs/1",
        source="LinkedIn",
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock(fixed_now):
    return lambda: fixed_now
