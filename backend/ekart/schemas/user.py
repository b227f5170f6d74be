"""
# `ekart/schemas/user.py` - Account schemas

| Model | Used by |
|---|---|
| `RegisterRequest` | `POST /user/register` |
| `VerifyRequest` / `ResendVerifyRequest` | `POST /user/verify`, `POST /user/verify/resend` |
| `LoginRequest` / `LoginResponse` | `POST /user/login` |
| `RefreshRequest` / `TokenResponse` | `POST /user/refresh` |
| `UserOut` | every endpoint that returns an account |

Passwords are never stored by the API; Firebase Authentication hashes and checks them.
"""
from datetime import datetime
from typing import Literal, Optional, Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from ekart.config import settings

Role = Literal["buyer", "seller"]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=80)]


class RegisterRequest(BaseModel):
    userName: NameStr = Field(..., description="Display name")
    email: EmailStr = Field(..., description="E-mail")
    password: Annotated[str, Field(min_length=6)] = Field(..., description="Password (min 6 characters)")
    role: Role = Field("buyer", description="buyer | seller")


class VerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., description="Numeric code from the verification e-mail")

    @field_validator("code")
    @classmethod
    def check_code(cls, v: str) -> str:
        # length follows VERIFY_CODE_LENGTH, read per request
        v = v.strip()
        n = settings.verify_code_length
        if len(v) != n or not (v.isascii() and v.isdigit()):
            raise ValueError(f"code must be {n} digits")
        return v


class ResendVerifyRequest(BaseModel):
    email: EmailStr


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="E-mail")
    password: Annotated[str, Field(min_length=6)] = Field(..., description="Password")


class RefreshRequest(BaseModel):
    refreshToken: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: str
    userName: str
    email: EmailStr
    role: Role
    profileImage: Optional[str] = None
    isVerified: bool = False
    isLoggedIn: bool = False
    createdAt: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "UserOut":
        return cls(
            id=doc["id"],
            userName=doc.get("user_name", ""),
            email=doc.get("email", ""),
            role=doc.get("role", "buyer"),
            profileImage=doc.get("profile_image"),
            isVerified=bool(doc.get("is_verified", False)),
            isLoggedIn=bool(doc.get("is_logged_in", False)),
            createdAt=doc.get("created_at"),
        )


class UserResponse(BaseModel):
    success: bool = True
    message: str
    user: UserOut


class TokenResponse(BaseModel):
    success: bool = True
    accessToken: str
    refreshToken: str
    expiresIn: int  # seconds


class LoginResponse(TokenResponse):
    message: str = "User logged in successfully"
    user: UserOut
