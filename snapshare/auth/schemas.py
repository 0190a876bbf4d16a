# snapshare/auth/schemas.py
import re
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]{8,}$")
PASSWORD_RULES = "Must contain eight characters, one letter, one number and one special character"

def _check_password(v: str) -> str:
    if not PASSWORD_PATTERN.match(v):
        raise ValueError(PASSWORD_RULES)
    return v

class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=30)
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username_or_email: str = Field(alias="usernameOrEmail", min_length=1)
    password: str = Field(min_length=1)

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

class TokenResponse(BaseModel):
    token: str

class ResetPasswordResponse(BaseModel):
    message: str
    token: str
