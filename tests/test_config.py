"""Fluent configuration and environment loading."""

from decimal import Decimal

import pytest

from storefront.config import StoreConfig

ENV_VARS = (
    "STOREFRONT_API_BASE",
    "STOREFRONT_DEFAULT_VAT_RATE",
    "STOREFRONT_CURRENCY",
    "STOREFRONT_REQUEST_TIMEOUT",
    "STOREFRONT_STORAGE_URL",
)


@pytest.fixture
def clean_env(monkeypatch):
    # Set then delete, so anything load_dotenv writes is undone too.
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestBuilder:
    def test_defaults(self):
        config = StoreConfig()
        assert config.default_vat_rate == Decimal("0.25")
        assert config.currency == "SEK"

    def test_chaining_returns_new_configs(self):
        base = StoreConfig()
        config = base.with_api_base("https://shop.example.com/").with_currency(" eur ").with_timeout(seconds=5)
        assert base.api_base == "http://localhost:8080"
        assert config.api_base == "https://shop.example.com"
        assert config.currency == "EUR"
        assert config.request_timeout == 5

    def test_endpoint_bases(self):
        config = StoreConfig().with_api_base("https://shop.example.com")
        assert config.store_base == "https://shop.example.com/api/store"
        assert config.admin_base == "https://shop.example.com/api/admin/store"

    @pytest.mark.parametrize("rate,expected", [(25, "0.25"), ("12%", "0.12"), (0.06, "0.06"), (-1, "0.25")])
    def test_vat_rate(self, rate, expected):
        assert StoreConfig().with_default_vat_rate(rate).default_vat_rate == Decimal(expected)


class TestFromEnv:
    def test_unset_keeps_defaults(self, clean_env, tmp_path):
        assert StoreConfig.from_env(tmp_path / "missing.env") == StoreConfig()

    def test_environment(self, clean_env, tmp_path):
        clean_env.setenv("STOREFRONT_API_BASE", "https://api.shop.se/")
        clean_env.setenv("STOREFRONT_DEFAULT_VAT_RATE", "12")
        clean_env.setenv("STOREFRONT_REQUEST_TIMEOUT", "2.5")

        config = StoreConfig.from_env(tmp_path / "missing.env")

        assert config.api_base == "https://api.shop.se"
        assert config.default_vat_rate == Decimal("0.12")
        assert config.request_timeout == 2.5

    def test_dotenv_file(self, clean_env, tmp_path):
        dotenv = tmp_path / ".env"
        dotenv.write_text("STOREFRONT_CURRENCY=nok\nSTOREFRONT_STORAGE_URL=sqlite+aiosqlite:///shop.db\n")

        config = StoreConfig.from_env(dotenv)

        assert config.currency == "NOK"
        assert config.storage_url == "sqlite+aiosqlite:///shop.db"

    def test_invalid_timeout(self, clean_env, tmp_path):
        clean_env.setenv("STOREFRONT_REQUEST_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="STOREFRONT_REQUEST_TIMEOUT"):
            StoreConfig.from_env(tmp_path / "missing.env")
