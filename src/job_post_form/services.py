import asyncio
import logging
from typing import Any

import httpx

from job_post_form.models import JobPostRecord, Option
from job_post_form.options import RefreshCallback, parse_options
from job_post_form.submission import SUCCESS_MESSAGE

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_BACKOFF = 2  # seconds
HTTP_TIMEOUT = 15.0  # seconds
USER_AGENT = "JobPostForm/0.1"

# Option endpoints and the key holding each option's label
OPTION_ENDPOINTS = {
    "stack": ("stacks", "name"),
    "requisites": ("requisites", "value"),
    "company": ("companies", "name"),
}


class JobService:
    """
    HTTP client for the job post backend.

    Option lists are fetched with retries; the create call is never retried,
    so a slow backend cannot end up with duplicate job posts.
    """

    def __init__(self, base_url: str, timeout: float = HTTP_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT},
        )

    async def create_job(self, record: JobPostRecord) -> str:
        """
        Post the record to the backend and return a human-readable status.
        Transport errors are raised to the caller.
        """
        async with self._client() as client:
            response = await client.post("/jobs", json=record.to_payload())

        if response.is_success:
            logger.info(f"Backend accepted job post '{record.blob}'.")
            return SUCCESS_MESSAGE

        message = self._error_message(response)
        logger.warning(f"Backend refused job post '{record.blob}': {message}")
        return message

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        if response.text.strip():
            return response.text.strip()
        return f"Erro {response.status_code}"

    async def _get_json(
        self,
        path: str,
        max_retries: int = MAX_RETRIES,
        initial_backoff: float = INITIAL_BACKOFF,
    ) -> Any:
        for attempt in range(1, max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.get(path)
                    response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                if attempt == max_retries:
                    logger.error(f"HTTP error after {max_retries} attempts fetching {path}: {e}")
                    raise
                backoff = initial_backoff * (2 ** (attempt - 1))
                logger.warning(
                    f"Fetch attempt {attempt}/{max_retries} for {path} failed: {e}. "
                    f"Retrying in {backoff}s..."
                )
                await asyncio.sleep(backoff)
        return None

    async def get_options(
        self,
        kind: str,
        max_retries: int = MAX_RETRIES,
        initial_backoff: float = INITIAL_BACKOFF,
    ) -> list[Option]:
        """Fetch one of the option lists ('stack', 'requisites' or 'company')."""
        try:
            path, label_key = OPTION_ENDPOINTS[kind]
        except KeyError:
            raise ValueError(f"Unknown option list '{kind}'") from None
        raw = await self._get_json(f"/{path}", max_retries, initial_backoff)
        return parse_options(raw or [], label_key=label_key)

    async def get_all_stack_options(self) -> list[Option]:
        return await self.get_options("stack")

    async def get_requisites_options(self) -> list[Option]:
        return await self.get_options("requisites")

    async def get_company_options(self) -> list[Option]:
        return await self.get_options("company")

    def refresher(self, kind: str) -> RefreshCallback:
        """Callback suitable for `OptionSource(refresh=...)`."""

        async def _refresh() -> list[Option]:
            return await self.get_options(kind)

        return _refresh
