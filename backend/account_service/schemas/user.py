from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Optional
import re
from uuid import UUID

from account_service.core.security import MAX_PASSWORD_BYTES

# Belarus numbers, with or without the +375 country code
PHONE_NUMBER_RE = re.compile(r'^(\+375)?\d{9}$')
PASSWORD_MIN_LENGTH = 8


def validate_phone_number(v: str) -> str:
    if not PHONE_NUMBER_RE.match(v):
        raise ValueError('phone_number must be a valid phone number')
    return v


PhoneNumber = Annotated[str, AfterValidator(validate_phone_number)]


class UserBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, examples=['Alice'])
    last_name: str = Field(..., min_length=1, max_length=100, examples=['Smith'])
    phone_number: PhoneNumber = Field(..., examples=['+375295551234'])


class UserCreate(UserBase):
    login: str = Field(..., min_length=1, max_length=100, examples=['AliceSmith'])
    password: str = Field(..., examples=['Password123!'])

    @field_validator('password')
    @classmethod
    def password_strong(cls, v):
        if (
            len(v) < PASSWORD_MIN_LENGTH
            or not re.search(r'[a-z]', v)
            or not re.search(r'[A-Z]', v)
            or not re.search(r'\d', v)
            or not re.search(r'[^A-Za-z0-9]', v)
        ):
            raise ValueError(
                'password must be at least 8 characters and contain a lowercase '
                'letter, an uppercase letter, a number and a symbol'
            )
        return v

    @field_validator('password')
    @classmethod
    def password_fits_bcrypt(cls, v):
        if len(v.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f'password must not exceed {MAX_PASSWORD_BYTES} bytes')
        return v


class UserUpdate(BaseModel):
    """Partial update; login and password cannot be changed here."""

    model_config = ConfigDict(extra='forbid')

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[PhoneNumber] = None


class UserResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    phone_number: str
    login: str

    model_config = ConfigDict(from_attributes=True)


class SignInRequest(BaseModel):
    login: str = Field(..., examples=['yourLogin'])
    password: str = Field(..., examples=['yourStrongPassword123!'])
