"""Settings defaults, parsing and validation."""

import pytest
from pydantic import ValidationError

from docgen.core.config import Settings, parse_cors_origins


class TestDefaults:

    def test_pool_and_renderer_defaults(self, monkeypatch):
        for name in ("DOCGEN_BROWSER_MAX_BROWSERS", "DOCGEN_BROWSER_MAX_PAGES", "DOCGEN_PAGE_LOAD_TIMEOUT_MS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.browser_max_browsers == 1
        assert settings.browser_max_pages == 5
        assert settings.page_load_timeout_ms == 60000
        assert settings.pdf_cache_ttl_seconds == 86400

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("DOCGEN_BROWSER_MAX_PAGES", "8")
        assert Settings(_env_file=None).browser_max_pages == 8

    def test_launch_args_split(self):
        settings = Settings(_env_file=None, browser_launch_args="--no-sandbox, --disable-gpu,")
        assert settings.launch_args == ["--no-sandbox", "--disable-gpu"]


class TestValidation:

    def test_pool_needs_a_browser(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, browser_max_browsers=0)

    def test_pool_needs_a_page(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, browser_max_pages=0)

    def test_production_without_bucket_warns(self):
        with pytest.warns(UserWarning, match="DOCGEN_PDF_BUCKET"):
            Settings(_env_file=None, environment="production", pdf_bucket=None)


class TestCorsOrigins:

    @pytest.mark.parametrize("raw,expected", [
        ('["https://a.example","http://localhost:3000"]', ["https://a.example", "http://localhost:3000"]),
        ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
        ("", ["http://localhost:3000"]),
        (["https://a.example"], ["https://a.example"]),
    ])
    def test_parse(self, raw, expected):
        assert parse_cors_origins(raw) == expected

    def test_list_input_stored_as_string(self):
        settings = Settings(_env_file=None, cors_origins=["https://a.example", "https://b.example"])
        assert settings.cors_origins == "https://a.example,https://b.example"
        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
