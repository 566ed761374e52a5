"""Settings validation."""

import pytest
from pydantic import ValidationError

from conftest import TEST_JWT_SECRET
from hr_api.config import Settings


def make_settings(**overrides) -> Settings:
    values = {"jwt_secret": TEST_JWT_SECRET, "database_url": "sqlite+aiosqlite://"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Environment-driven settings and their guards."""

    def test_short_jwt_secret_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(jwt_secret="too-short")

    def test_default_password_is_unset_by_default(self) -> None:
        assert make_settings().default_password is None

    def test_short_default_password_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(default_password="abc")

    def test_unsupported_database_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(database_url="mysql://localhost/hr")

    def test_debug_is_rejected_in_production(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(environment="production", debug=True, database_url="postgresql://db/hr")

    def test_sqlite_is_rejected_in_production(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(environment="production")

    def test_low_entropy_secret_is_rejected_in_production(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(environment="production", database_url="postgresql://db/hr", jwt_secret="ab" * 20)

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(default_page_size=500)

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("sqlite:///./hr.db", "sqlite+aiosqlite:///./hr.db"),
            ("sqlite+aiosqlite://", "sqlite+aiosqlite://"),
            ("postgres://u:p@db/hr", "postgresql+asyncpg://u:p@db/hr"),
            ("postgresql://u:p@db/hr?sslmode=require", "postgresql+asyncpg://u:p@db/hr?ssl=require"),
            ("postgresql+asyncpg://u:p@db/hr", "postgresql+asyncpg://u:p@db/hr"),
        ],
    )
    def test_async_database_url(self, url: str, expected: str) -> None:
        assert make_settings(database_url=url).async_database_url == expected

    def test_cors_origins_list(self) -> None:
        settings = make_settings(cors_origins="http://a.example, https://b.example ,")
        assert settings.cors_origins_list == ["http://a.example", "https://b.example"]
