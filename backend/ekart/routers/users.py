"""
# `ekart/routers/users.py` - Accounts & sessions (`/user`)

| Endpoint | Auth | Purpose |
|---|---|---|
| `POST /user/register` | - | Create a buyer or seller account, e-mail a verification code |
| `POST /user/verify` | - | Confirm the code; creates the blank market profile and empty cart |
| `POST /user/verify/resend` | - | New code for an unverified account |
| `POST /user/login` | - | E-mail + password, returns Firebase ID/refresh tokens and opens a session |
| `POST /user/refresh` | - | New ID token for a live session |
| `POST /user/logout` | token | Ends the session and revokes refresh tokens |
| `GET /user/me` | session | Current account |
| `PUT /user/profile` | session | Change user name and/or profile image (multipart) |
| `GET /user/profile/{user_id}` | - | Public account view |

Login failures are 400 (unknown e-mail, wrong password) or 401 (unverified account).
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ekart.config import get_bucket, get_db
from ekart.core.security import get_current_user, get_token_uid
from ekart.schemas.user import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    ResendVerifyRequest,
    TokenResponse,
    UserOut,
    UserResponse,
    VerifyRequest,
)
from ekart.services import account as svc

router = APIRouter(prefix="/user", tags=["User"])

_VERIFY_ERRORS = {
    "UNKNOWN_USER": (status.HTTP_404_NOT_FOUND, "User not found"),
    "ALREADY_VERIFIED": (status.HTTP_400_BAD_REQUEST, "User is already verified"),
    "NO_ACTIVE_REQUEST": (status.HTTP_400_BAD_REQUEST, "No pending verification; request a new code"),
    "EXPIRED": (status.HTTP_400_BAD_REQUEST, "Verification code expired; request a new code"),
    "TOO_MANY_ATTEMPTS": (status.HTTP_429_TOO_MANY_REQUESTS, "Too many wrong attempts; request a new code"),
    "INVALID_CODE": (status.HTTP_400_BAD_REQUEST, "Invalid verification code"),
}


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db=Depends(get_db)):
    user = await svc.register(db, payload)
    return UserResponse(
        message="User registered successfully. Check your e-mail for the verification code.",
        user=UserOut.from_doc(user),
    )


@router.post("/verify", response_model=UserResponse)
def verify(payload: VerifyRequest, db=Depends(get_db)):
    try:
        user = svc.verify(db, payload.email, payload.code)
    except ValueError as e:
        code = str(e)
        if code in _VERIFY_ERRORS:
            status_code, message = _VERIFY_ERRORS[code]
            raise HTTPException(status_code, message)
        raise
    return UserResponse(message="User verified successfully", user=UserOut.from_doc(user))


@router.post("/verify/resend")
async def resend_verification(payload: ResendVerifyRequest, db=Depends(get_db)):
    await svc.resend_verification(db, payload.email)
    return {"success": True, "message": "A new verification code was sent"}


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db=Depends(get_db)):
    result = await svc.login(db, payload.email, payload.password)
    return LoginResponse(
        accessToken=result["accessToken"],
        refreshToken=result["refreshToken"],
        expiresIn=result["expiresIn"],
        user=UserOut.from_doc(result["user"]),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(payload: RefreshRequest, db=Depends(get_db)):
    return TokenResponse(**await svc.refresh(db, payload.refreshToken))


@router.post("/logout")
def logout(uid: str = Depends(get_token_uid), db=Depends(get_db)):
    svc.logout(db, uid)
    return {"success": True, "message": "User logged out successfully"}


@router.get("/me", response_model=UserOut)
def me(current_user: dict = Depends(get_current_user)):
    return UserOut.from_doc(current_user)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    userName: Optional[str] = Form(None, max_length=80),
    file: Optional[UploadFile] = File(None, description="jpeg / png / svg, max 5 MB"),
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
    bucket=Depends(get_bucket),
):
    image = file if file is not None and file.filename else None
    user = svc.update_account(db, bucket, current_user["id"], userName, image)
    return UserResponse(message="Profile updated", user=UserOut.from_doc(user))


@router.get("/profile/{user_id}", response_model=UserOut)
def get_user_profile(user_id: str, db=Depends(get_db)):
    return UserOut.from_doc(svc.get_user(db, user_id))
