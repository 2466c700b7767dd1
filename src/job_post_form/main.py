import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError

from job_post_form import config
from job_post_form.models import CuratorIdentity, JobPostDraft
from job_post_form.options import OptionSource
from job_post_form.services import JobService
from job_post_form.submission import JobPostForm, SubmissionOutcome

# Set up logging once, in the application entry point only
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO
)
logger = logging.getLogger(__name__)


def load_draft(path: Path) -> JobPostDraft:
    """Read a draft from a JSON file with the form's field names as keys."""
    return JobPostDraft.model_validate_json(path.read_text(encoding="utf-8"))


async def submit_draft(
    draft: JobPostDraft,
    curator: CuratorIdentity,
    indicated_by: str | None,
    timeout: int,
    locale: str | None = None,
) -> bool:
    """Submit one draft through a form wired to the HTTP backend. Returns True on success."""
    service = JobService(base_url=config.JOBPOST_API_URL)
    stack_options = OptionSource("stack", refresh=service.refresher("stack"))
    company_options = OptionSource("company", refresh=service.refresher("company"))

    # Stack tags and company identifiers are shown by label in the blob
    sources = [stack_options]
    if isinstance(draft.company, int):
        sources.append(company_options)
    for source in sources:
        try:
            await source.refresh()
        except httpx.HTTPError as e:
            logger.warning(f"Could not load {source.name} options, using raw identifiers: {e}")

    form = JobPostForm(
        create_job=service.create_job,
        curator=curator,
        indicated_by=indicated_by,
        stack_options=stack_options,
        company_options=company_options,
        locale=locale or config.JOBPOST_BLOB_LOCALE,
        timeout=timeout,
    )
    form.draft = draft

    result = await form.submit()

    if result.outcome == SubmissionOutcome.REJECTED:
        for field, message in sorted(result.errors.items()):
            logger.error(f"{field}: {message}")
        return False
    if not result.ok:
        logger.error(f"Job post not created: {result.message}")
        return False

    logger.info(f"{result.message} -> {result.record.blob if result.record else ''}")
    return True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="job-post-form",
        description="Validate a job post draft and submit it to the job post backend.",
    )
    parser.add_argument("draft", type=Path, help="Path to a JSON file holding the draft.")
    parser.add_argument("--curator-id", required=True, help="Identifier of the curator.")
    parser.add_argument("--curator-name", required=True, help="Display name of the curator.")
    parser.add_argument(
        "--indicated-by",
        default=None,
        metavar="ID",
        help="Identifier of the user who referred the job (optional).",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        metavar="SECONDS",
        help=(
            "Seconds to wait for the create call "
            "(overrides JOBPOST_SUBMIT_TIMEOUT env var). Must be a positive integer."
        ),
    )
    return parser.parse_args(argv)


def cli(argv: list[str] | None = None) -> None:
    """CLI entry point for the package."""
    args = parse_args(argv)

    # Determine timeout: CLI flag > env var > default (30)
    if args.timeout is not None:
        if args.timeout <= 0:
            logger.error("--timeout must be a positive integer.")
            sys.exit(1)
        timeout = args.timeout
    else:
        try:
            timeout = config.JOBPOST_SUBMIT_TIMEOUT
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)

    try:
        locale = config.JOBPOST_BLOB_LOCALE
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        draft = load_draft(args.draft)
    except (OSError, ValidationError) as e:
        logger.error(f"Could not read draft from {args.draft}: {e}")
        sys.exit(1)

    curator = CuratorIdentity(id=args.curator_id, name=args.curator_name)
    ok = asyncio.run(submit_draft(draft, curator, args.indicated_by, timeout, locale))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    cli()
