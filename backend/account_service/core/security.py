import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from account_service.core.config import MIN_SECRET_LENGTH, Settings
from account_service.core.exceptions import ConfigurationError, InvalidTokenError

logger = logging.getLogger(__name__)

USER_ID_CLAIM = "userId"
# bcrypt ignores input past this length
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing with a cost factor fixed at construction."""

    def __init__(self, rounds: int):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(settings.SALT_ROUNDS)

    def hash(self, password: str, rounds: Optional[int] = None) -> str:
        """Hash a password. ``rounds`` overrides the configured cost factor.

        Raises:
            ValueError: password longer than bcrypt's 72-byte input limit.
        """
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
        if rounds is None:
            return self._context.hash(password)
        return self._context.handler().using(rounds=rounds).hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against a stored hash.

        A stored value that is not a recognisable bcrypt hash counts as a
        mismatch instead of raising. So does a password bcrypt would
        truncate, since ``hash`` never accepts one.
        """
        if len(plain_password.encode()) > MAX_PASSWORD_BYTES:
            logger.warning("Presented password exceeds maximum size")
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenOptions:
    secret: str
    expires_in: int  # seconds


@dataclass(frozen=True)
class TokenPairData:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Sign and verify access/refresh JWTs.

    Each token kind has its own secret and lifetime. The payload carries the
    user id only; ``iat`` and ``exp`` are added at signing time.
    """

    def __init__(
        self,
        options: Dict[TokenKind, TokenOptions],
        algorithm: str = "HS256",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        for kind in TokenKind:
            opts = options.get(kind)
            if opts is None:
                raise ConfigurationError(f"Missing options for {kind.value} token")
            if not opts.secret or len(opts.secret) < MIN_SECRET_LENGTH:
                raise ConfigurationError(f"Secret for {kind.value} token is too short")
            if opts.expires_in <= 0:
                raise ConfigurationError(f"Expiration for {kind.value} token must be positive")
        if options[TokenKind.ACCESS].secret == options[TokenKind.REFRESH].secret:
            raise ConfigurationError("Access and refresh tokens must use different secrets")

        self._options = dict(options)
        self.algorithm = algorithm
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "TokenIssuer":
        return cls(
            {
                TokenKind.ACCESS: TokenOptions(
                    secret=settings.JWT_ACCESS_TOKEN_SECRET,
                    expires_in=settings.JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS,
                ),
                TokenKind.REFRESH: TokenOptions(
                    secret=settings.JWT_REFRESH_TOKEN_SECRET,
                    expires_in=settings.JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS,
                ),
            },
            algorithm=settings.JWT_ALGORITHM,
            **kwargs,
        )

    def create_token(self, payload: Dict[str, Any], kind: TokenKind) -> str:
        """
        Sign ``payload`` as a token of the given kind.

        Args:
            payload: Claims to encode.
            kind: Which secret and lifetime to use.

        Returns:
            JWT token string.
        """
        opts = self._options[kind]
        issued_at = self._clock()
        to_encode = dict(payload)
        to_encode.update({
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=opts.expires_in),
        })
        return jwt.encode(to_encode, opts.secret, algorithm=self.algorithm)

    def issue_token_pair(self, user_id: str) -> TokenPairData:
        """Mint an access token and a refresh token for ``user_id``."""
        payload = {USER_ID_CLAIM: str(user_id)}
        return TokenPairData(
            access_token=self.create_token(payload, TokenKind.ACCESS),
            refresh_token=self.create_token(payload, TokenKind.REFRESH),
        )

    def verify(self, token: str, kind: TokenKind) -> Dict[str, Any]:
        """
        Decode and validate a token of the given kind.

        Raises:
            InvalidTokenError: bad signature, malformed token, expired token
                or missing user id.
        """
        opts = self._options[kind]
        try:
            payload = jwt.decode(token, opts.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise InvalidTokenError(f"{kind.value.capitalize()} token was expired")
        except JWTError:
            raise InvalidTokenError(f"Invalid {kind.value} token")

        if not payload.get(USER_ID_CLAIM):
            raise InvalidTokenError(f"Invalid {kind.value} token")
        return payload
