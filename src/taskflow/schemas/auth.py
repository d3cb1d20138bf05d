from pydantic import BaseModel, EmailStr, Field, field_validator
from zxcvbn import zxcvbn

from src.taskflow.schemas.organization import MembershipRead
from src.taskflow.schemas.user import UserRead

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Validate password strength using zxcvbn entropy estimation."""
        result = zxcvbn(v)
        if result["score"] >= MIN_PASSWORD_SCORE:
            return v

        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])
        if warning:
            raise ValueError(f"Weak password: {warning}")
        if suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        raise ValueError("Password is too weak. Use a longer password with a mix of characters.")


class LoginRequest(BaseModel):
    email: EmailStr
    # No strength rules here: a short wrong password is still just wrong
    password: str = Field(min_length=1, max_length=100)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    user: UserRead
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(RegisterResponse):
    organizations: list[MembershipRead] = []


class RefreshResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
