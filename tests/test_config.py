import pytest
from pydantic import ValidationError

from account_service.core.config import Settings
from conftest import ACCESS_SECRET, REFRESH_SECRET

REQUIRED = {
    "JWT_ACCESS_TOKEN_SECRET": ACCESS_SECRET,
    "JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS": 60,
    "JWT_REFRESH_TOKEN_SECRET": REFRESH_SECRET,
    "JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS": 3600,
    "SALT_ROUNDS": 10,
    "DATABASE_URL": "sqlite+aiosqlite://",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("BACKEND_CORS_ORIGINS", raising=False)


def make_settings(**overrides) -> Settings:
    values = {**REQUIRED, **overrides}
    return Settings(_env_file=None, **values)


def test_valid_settings():
    settings = make_settings()
    assert settings.JWT_ALGORITHM == "HS256"
    assert settings.SALT_ROUNDS == 10
    assert settings.API_STR == ""


def test_reads_environment(monkeypatch):
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, str(value))
    settings = Settings(_env_file=None)
    assert settings.JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS == 60
    assert settings.JWT_REFRESH_TOKEN_SECRET == REFRESH_SECRET


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_value_aborts(missing):
    values = {k: v for k, v in REQUIRED.items() if k != missing}
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **values)


@pytest.mark.parametrize("field", ["JWT_ACCESS_TOKEN_SECRET", "JWT_REFRESH_TOKEN_SECRET"])
def test_short_secret_rejected(field):
    with pytest.raises(ValidationError):
        make_settings(**{field: "123456789"})


def test_non_integer_expiration_rejected():
    with pytest.raises(ValidationError):
        make_settings(JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS="soon")


def test_identical_secrets_rejected():
    with pytest.raises(ValidationError, match="must differ"):
        make_settings(JWT_REFRESH_TOKEN_SECRET=ACCESS_SECRET)


def test_refresh_outliving_access():
    with pytest.raises(ValidationError):
        make_settings(
            JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS=3600,
            JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS=60,
        )


@pytest.mark.parametrize("rounds", [3, 32])
def test_salt_rounds_bounds(rounds):
    with pytest.raises(ValidationError):
        make_settings(SALT_ROUNDS=rounds)


def test_cors_origins_from_comma_string(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "http://localhost:3000, http://example.com")
    settings = make_settings()
    assert settings.BACKEND_CORS_ORIGINS == ["http://localhost:3000", "http://example.com"]
