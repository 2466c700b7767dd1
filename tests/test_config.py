import pytest

# NOTE: conftest.py already sets JOBPOST_API_URL, JOBPOST_SUBMIT_TIMEOUT and
# JOBPOST_BLOB_LOCALE in os.environ before any source imports. These tests use
# monkeypatch to override/remove env vars for specific scenarios.


def test_import_config_does_not_crash():
    """Test that importing config module does not raise even if env vars exist."""
    import job_post_form.config  # noqa: F401


def test_access_api_url_returns_string():
    from job_post_form.config import JOBPOST_API_URL

    assert JOBPOST_API_URL == "https://api.example.com"


def test_api_url_trailing_slash_stripped(monkeypatch):
    monkeypatch.setenv("JOBPOST_API_URL", "https://api.example.com/v1/")

    from job_post_form.config import _Config

    assert _Config().JOBPOST_API_URL == "https://api.example.com/v1"


def test_missing_api_url_raises_on_access(monkeypatch):
    """Test that accessing config raises ValueError when JOBPOST_API_URL is missing."""
    monkeypatch.delenv("JOBPOST_API_URL", raising=False)

    from job_post_form.config import _Config

    cfg = _Config()
    with pytest.raises(ValueError, match="JOBPOST_API_URL"):
        _ = cfg.JOBPOST_API_URL


def test_submit_timeout_default(monkeypatch):
    monkeypatch.delenv("JOBPOST_SUBMIT_TIMEOUT", raising=False)

    from job_post_form.config import _Config

    assert _Config().JOBPOST_SUBMIT_TIMEOUT == 30


@pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5"])
def test_submit_timeout_invalid(monkeypatch, raw):
    monkeypatch.setenv("JOBPOST_SUBMIT_TIMEOUT", raw)

    from job_post_form.config import _Config

    with pytest.raises(ValueError, match="JOBPOST_SUBMIT_TIMEOUT"):
        _ = _Config().JOBPOST_SUBMIT_TIMEOUT


def test_blob_locale_default(monkeypatch):
    monkeypatch.delenv("JOBPOST_BLOB_LOCALE", raising=False)

    from job_post_form.config import _Config

    assert _Config().JOBPOST_BLOB_LOCALE == "pt-BR"


def test_config_lazy_loads_only_once():
    """Test that _Config only calls get_config() once (caches result)."""
    from job_post_form.config import _Config

    cfg = _Config()
    assert cfg._config is None

    _ = cfg.JOBPOST_API_URL
    first_config = cfg._config
    assert first_config is not None

    _ = cfg.JOBPOST_BLOB_LOCALE
    assert cfg._config is first_config


def test_module_getattr_unknown_attribute():
    import job_post_form.config as config_module

    with pytest.raises(AttributeError, match="NONEXISTENT"):
        _ = config_module.NONEXISTENT


def test_blob_locale_invalid(monkeypatch):
    """Test that a locale without month names is refused on access."""
    monkeypatch.setenv("JOBPOST_BLOB_LOCALE", "en")

    from job_post_form.config import _Config

    with pytest.raises(ValueError, match="JOBPOST_BLOB_LOCALE"):
        _ = _Config().JOBPOST_BLOB_LOCALE


def test_blob_locale_english(monkeypatch):
    monkeypatch.setenv("JOBPOST_BLOB_LOCALE", "en-US")

    from job_post_form.config import _Config

    assert _Config().JOBPOST_BLOB_LOCALE == "en-US"
