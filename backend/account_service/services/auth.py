"""Registration, login and token refresh."""
import logging

from fastapi.concurrency import run_in_threadpool

from account_service.core.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from account_service.core.security import PasswordHasher, TokenIssuer, TokenPairData
from account_service.models.user import User
from account_service.schemas.user import UserCreate
from account_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class AuthService:
    """Credential checks and token issuance on top of the user directory.

    bcrypt work runs in the thread pool so a slow hash does not block the
    event loop.
    """

    def __init__(self, directory: UserDirectory, hasher: PasswordHasher, issuer: TokenIssuer):
        self.directory = directory
        self.hasher = hasher
        self.issuer = issuer

    async def register(self, user_data: UserCreate) -> User:
        # Fast path only; the unique index decides under concurrency
        if await self.directory.find_by_login(user_data.login):
            raise UserAlreadyExistsError()

        password_hash = await run_in_threadpool(self.hasher.hash, user_data.password)
        user = await self.directory.create(
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone_number=user_data.phone_number,
            login=user_data.login,
            password_hash=password_hash,
        )
        logger.info(f"New user registered: {user.login}")
        return user

    async def login(self, login: str, password: str) -> TokenPairData:
        """
        Verify credentials and issue a token pair.

        Raises:
            InvalidCredentialsError: unknown login or wrong password, with
                the same message in both cases.
        """
        user = await self.directory.find_by_login(login)
        if not user:
            logger.warning(f"Login attempt with non-existent login: {login}")
            raise InvalidCredentialsError()

        if not await run_in_threadpool(self.hasher.verify, password, user.password):
            logger.warning(f"Failed login attempt for user: {user.login}")
            raise InvalidCredentialsError()

        logger.info(f"User logged in successfully: {user.login}")
        return self.issuer.issue_token_pair(str(user.id))

    def refresh(self, user_id: str) -> TokenPairData:
        """Issue a new pair for a user whose refresh token was already verified."""
        logger.info(f"Token refreshed for user: {user_id}")
        return self.issuer.issue_token_pair(user_id)
