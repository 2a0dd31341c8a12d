import pytest
import pytest_asyncio
import uuid
from typing import Any, Dict

from fastapi.testclient import TestClient

from account_service.core.config import Settings
from account_service.core.database import Database
from account_service.core.security import PasswordHasher, TokenIssuer
from account_service.main import create_app
from account_service.services.auth import AuthService
from account_service.services.user_directory import UserDirectory

ACCESS_SECRET = "access-secret-for-tests"
REFRESH_SECRET = "refresh-secret-for-tests"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for an isolated in-memory database"""
    return Settings(
        _env_file=None,
        JWT_ACCESS_TOKEN_SECRET=ACCESS_SECRET,
        JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS=900,
        JWT_REFRESH_TOKEN_SECRET=REFRESH_SECRET,
        JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS=7 * 24 * 3600,
        SALT_ROUNDS=4,
        DATABASE_URL="sqlite+aiosqlite://",
        AUTO_CREATE_TABLES=True,
        LOG_DIR=str(tmp_path / "logs"),
        LOG_LEVEL="warning",
    )


@pytest.fixture
def hasher(settings) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def issuer(settings) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def client(settings):
    """Test client with lifespan (tables created on startup)"""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def db_session(settings):
    database = Database(settings)
    await database.create_all()
    async with database.session_factory() as session:
        yield session
    await database.dispose()


@pytest.fixture
def directory(db_session) -> UserDirectory:
    return UserDirectory(db_session)


@pytest.fixture
def auth_service(directory, hasher, issuer) -> AuthService:
    return AuthService(directory, hasher, issuer)


@pytest.fixture
def user_data() -> Dict[str, str]:
    """Valid user payload with a unique login"""
    return {
        "first_name": "Alice",
        "last_name": "Smith",
        "phone_number": "+375295551234",
        "login": f"AliceSmith_{uuid.uuid4().hex[:8]}",
        "password": "Password123!",
    }


@pytest.fixture
def registered_user(client, user_data) -> Dict[str, Any]:
    """Sign up, sign in and return user data with tokens"""
    response = client.post("/auth/sign-up", json=user_data)
    assert response.status_code == 201, f"Registration failed: {response.text}"

    login_response = client.post(
        "/auth/sign-in",
        json={"login": user_data["login"], "password": user_data["password"]},
    )
    assert login_response.status_code == 200
    tokens = login_response.json()

    return {
        "user": response.json(),
        "user_data": user_data,
        "tokens": tokens,
        "headers": {"Authorization": f"Bearer {tokens['access_token']}"},
    }
