import os

from dotenv import load_dotenv

from job_post_form.slug import check_locale

# Load environment variables from .env file
load_dotenv()


def get_config() -> dict[str, str]:
    """
    Load and validate configuration from environment variables.
    Called lazily to avoid crashing on import.
    """
    api_url = os.getenv("JOBPOST_API_URL", "")

    if not api_url:
        raise ValueError("JOBPOST_API_URL is not set in the environment variables.")

    return {
        "JOBPOST_API_URL": api_url,
        "JOBPOST_SUBMIT_TIMEOUT": os.getenv("JOBPOST_SUBMIT_TIMEOUT", "30"),
        "JOBPOST_BLOB_LOCALE": os.getenv("JOBPOST_BLOB_LOCALE", "pt-BR"),
    }


class _Config:
    """Lazy configuration that only validates when values are actually accessed."""

    def __init__(self) -> None:
        self._config: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def JOBPOST_API_URL(self) -> str:
        """Base URL of the job post backend, without a trailing slash."""
        return self._load()["JOBPOST_API_URL"].rstrip("/")

    @property
    def JOBPOST_SUBMIT_TIMEOUT(self) -> int:
        """Seconds to wait for the create call. Must be a positive integer."""
        raw = self._load()["JOBPOST_SUBMIT_TIMEOUT"]
        try:
            timeout = int(raw)
        except ValueError:
            raise ValueError(
                f"JOBPOST_SUBMIT_TIMEOUT must be a positive integer, got '{raw}'"
            ) from None
        if timeout <= 0:
            raise ValueError(f"JOBPOST_SUBMIT_TIMEOUT must be a positive integer, got {timeout}")
        return timeout

    @property
    def JOBPOST_BLOB_LOCALE(self) -> str:
        """Locale used for the month name in the blob. Must have month names available."""
        raw = self._load()["JOBPOST_BLOB_LOCALE"]
        try:
            return check_locale(raw)
        except ValueError as e:
            raise ValueError(f"JOBPOST_BLOB_LOCALE is invalid: {e}") from None


_cfg = _Config()

# Module-level type declarations for mypy.
# The actual values come from __getattr__ below.
JOBPOST_API_URL: str
JOBPOST_SUBMIT_TIMEOUT: int
JOBPOST_BLOB_LOCALE: str


# Module-level lazy access using __getattr__ (PEP 562).
def __getattr__(name: str) -> str | int:
    if name == "JOBPOST_API_URL":
        return _cfg.JOBPOST_API_URL
    if name == "JOBPOST_SUBMIT_TIMEOUT":
        return _cfg.JOBPOST_SUBMIT_TIMEOUT
    if name == "JOBPOST_BLOB_LOCALE":
        return _cfg.JOBPOST_BLOB_LOCALE
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
