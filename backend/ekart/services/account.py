"""
ekart/services/account.py - Registration, e-mail verification, login sessions.

Passwords are held by Firebase Authentication. The API keeps:
- `users/{uid}`            account document (role, verification and login flags)
- `verify_requests/{uid}`  HMAC hash of the one-time e-mail code, expiry, attempts
- `sessions/{uid}`         live login session; tokens without it are rejected
"""
import logging
import smtplib
from typing import Any, Dict, Optional, Tuple

import httpx
from fastapi import HTTPException, UploadFile, status
from firebase_admin import auth as firebase_auth

from ekart.config import settings
from ekart.core.crypto import codes_match, gen_numeric_code, hmac_hash
from ekart.core.email_utils import send_email
from ekart.repositories import carts as carts_repo
from ekart.repositories import profiles as profiles_repo
from ekart.repositories import sessions as sessions_repo
from ekart.repositories import users as users_repo
from ekart.repositories import verify_requests as verify_repo
from ekart.schemas.user import RegisterRequest
from ekart.services.storage import upload_image
from ekart.utils.timestamps import utcnow

logger = logging.getLogger("ekart.account")

FIREBASE_SIGNIN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
FIREBASE_REFRESH_URL = "https://securetoken.googleapis.com/v1/token"
BAD_PASSWORD_ERRORS = {"INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS", "EMAIL_NOT_FOUND"}


# --- Firebase REST proxies ---

async def firebase_sign_in(email: str, password: str) -> Tuple[int, Dict[str, Any]]:
    async with httpx.AsyncClient(timeout=10) as client:
        resp = await client.post(
            FIREBASE_SIGNIN_URL,
            params={"key": settings.firebase_web_api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
        )
    return resp.status_code, resp.json()


async def firebase_refresh(refresh_token: str) -> Tuple[int, Dict[str, Any]]:
    async with httpx.AsyncClient(timeout=10) as client:
        resp = await client.post(
            FIREBASE_REFRESH_URL,
            params={"key": settings.firebase_web_api_key},
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
    return resp.status_code, resp.json()


def _firebase_error(data: Dict[str, Any]) -> str:
    # "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account ..." -> first token
    message = (data.get("error") or {}).get("message", "")
    return message.split(":")[0].strip()


# --- Registration & verification ---

def purge_user(db, uid: str) -> None:
    """Remove the Firebase account and every document keyed by the uid."""
    try:
        firebase_auth.delete_user(uid)
    except firebase_auth.UserNotFoundError:
        pass
    users_repo.delete(db, uid)
    verify_repo.delete(db, uid)
    sessions_repo.delete(db, uid)
    profiles_repo.delete(db, uid)
    carts_repo.delete(db, uid)


async def issue_verification(db, user: Dict[str, Any]) -> None:
    """
    Generate a one-time numeric code, store its hash and e-mail it.
    Delivery failures are logged; the user can ask for a new code.
    """
    uid = user["id"]
    code = gen_numeric_code(settings.verify_code_length)
    verify_repo.create_or_replace(db, uid, hmac_hash(uid, code), settings.verify_code_ttl_seconds)
    if settings.debug:
        logger.info("Verification code for %s: %s", user["email"], code)

    minutes = settings.verify_code_ttl_seconds // 60
    html = f"""<div style="font-family:Arial,sans-serif">
      <h2>Welcome to EKart</h2>
      <p>Hi {user.get("user_name") or ""},</p>
      <p>Your verification code:</p>
      <p style="font-size:24px;font-weight:bold;letter-spacing:3px">{code}</p>
      <p>The code is valid for {minutes} minutes. Do not share it.</p>
    </div>"""
    try:
        await send_email(user["email"], "Verify your EKart account", html)
    except (RuntimeError, smtplib.SMTPException, OSError):
        logger.exception("Verification e-mail to %s could not be sent", user["email"])


async def register(db, payload: RegisterRequest) -> Dict[str, Any]:
    email = payload.email.lower()
    existing = users_repo.find_by_email(db, email)
    if existing:
        if existing.get("is_verified"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists and is verified. Please login.",
            )
        # never verified: drop the leftover and start over
        logger.info("Replacing unverified registration %s for %s", existing["id"], email)
        purge_user(db, existing["id"])

    try:
        record = firebase_auth.create_user(email=email, password=payload.password, display_name=payload.userName)
    except firebase_auth.EmailAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already registered")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    user = users_repo.create(db, record.uid, payload.userName, email, payload.role)
    await issue_verification(db, user)
    logger.info("Registered %s %s (%s)", payload.role, record.uid, email)
    return user


async def resend_verification(db, email: str) -> None:
    user = users_repo.find_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.get("is_verified"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is already verified")
    await issue_verification(db, user)


def verify(db, email: str, code: str) -> Dict[str, Any]:
    """
    Check the e-mailed code. On success the account is verified and gets its blank
    market profile and empty cart. Failures raise ValueError with a reason code.
    """
    user = users_repo.find_by_email(db, email)
    if not user:
        raise ValueError("UNKNOWN_USER")
    if user.get("is_verified"):
        raise ValueError("ALREADY_VERIFIED")
    uid = user["id"]

    rec = verify_repo.get(db, uid)
    if not rec or rec.get("consumed"):
        raise ValueError("NO_ACTIVE_REQUEST")

    if verify_repo.now_ts() > int(rec.get("expires_at_unix", 0)):
        verify_repo.consume(db, uid)
        raise ValueError("EXPIRED")

    if int(rec.get("attempts", 0)) >= settings.verify_max_attempts:
        verify_repo.consume(db, uid)
        raise ValueError("TOO_MANY_ATTEMPTS")

    if not codes_match(uid, code, rec.get("code_hash")):
        verify_repo.increment_attempt(db, uid)
        raise ValueError("INVALID_CODE")

    verify_repo.consume(db, uid)
    users_repo.update(db, uid, {"is_verified": True, "verified_at": utcnow()})
    try:
        firebase_auth.update_user(uid, email_verified=True)
    except firebase_auth.UserNotFoundError:
        logger.warning("Verified user %s has no Firebase account", uid)

    if profiles_repo.get(db, uid) is None:
        profiles_repo.create_blank(db, uid)
    if not carts_repo.exists(db, uid):
        carts_repo.clear(db, uid)

    logger.info("User %s verified", uid)
    return users_repo.get(db, uid)


# --- Sessions ---

async def login(db, email: str, password: str) -> Dict[str, Any]:
    user = users_repo.find_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unauthorised access, register first")

    try:
        status_code, data = await firebase_sign_in(email.lower(), password)
    except httpx.HTTPError:
        logger.exception("Firebase sign-in request failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Authentication service unavailable")

    if status_code != 200:
        reason = _firebase_error(data)
        if reason in BAD_PASSWORD_ERRORS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Incorrect password")
        logger.warning("Firebase login failed for %s: %s", email, reason)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=reason or "Invalid credentials")

    if not user.get("is_verified"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Verify your email before logging in")

    uid = user["id"]
    sessions_repo.create_or_replace(db, uid)
    users_repo.update(db, uid, {"is_logged_in": True})
    logger.info("User %s logged in", uid)
    return {
        "accessToken": data["idToken"],
        "refreshToken": data["refreshToken"],
        "expiresIn": int(data["expiresIn"]),
        "user": users_repo.get(db, uid),
    }


async def refresh(db, refresh_token: str) -> Dict[str, Any]:
    try:
        status_code, data = await firebase_refresh(refresh_token)
    except httpx.HTTPError:
        logger.exception("Firebase token refresh failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Authentication service unavailable")

    if status_code != 200:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_firebase_error(data) or "Invalid refresh token")
    if sessions_repo.get(db, data["user_id"]) is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired, please login again")

    return {
        "accessToken": data["id_token"],
        "refreshToken": data["refresh_token"],
        "expiresIn": int(data["expires_in"]),
    }


def logout(db, uid: str) -> None:
    if sessions_repo.get(db, uid) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already logged out")
    sessions_repo.delete(db, uid)
    users_repo.update(db, uid, {"is_logged_in": False})
    try:
        firebase_auth.revoke_refresh_tokens(uid)
    except firebase_auth.UserNotFoundError:
        pass
    logger.info("User %s logged out", uid)


# --- Account profile ---

def get_user(db, uid: str) -> Dict[str, Any]:
    user = users_repo.get(db, uid)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def update_account(db, bucket, uid: str, user_name: Optional[str],
                   image: Optional[UploadFile] = None) -> Dict[str, Any]:
    patch: Dict[str, Any] = {}
    if image is not None:
        patch["profile_image"] = upload_image(bucket, image, f"profiles/{uid}")
    if user_name and user_name.strip():
        patch["user_name"] = user_name.strip()
    if patch:
        users_repo.update(db, uid, patch)
    return get_user(db, uid)
