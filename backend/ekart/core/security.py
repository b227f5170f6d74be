"""
# `ekart/core/security.py` - Authentication dependencies

Requests authenticate with `Authorization: Bearer <Firebase ID token>`.

- `get_token_uid` verifies the ID token with the Firebase Admin SDK
  (`check_revoked=True`, so tokens issued before a logout are rejected).
- `get_current_user` additionally requires the session record written at login
  (`sessions/{uid}`) and loads the `users/{uid}` document.
- `require_seller` restricts an endpoint to seller accounts.
"""
from typing import Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth

from ekart.config import get_db
from ekart.repositories import sessions, users

# HTTPBearer is a FastAPI provided security scheme for "Authorization: Bearer <token>" header
oauth2_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_uid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme)
) -> str:
    """Verify the bearer ID token and return its uid."""
    if not credentials or not credentials.scheme or not credentials.credentials:
        raise _unauthorized("Authentication credentials were not provided")

    try:
        decoded = firebase_auth.verify_id_token(credentials.credentials, check_revoked=True)
    except firebase_auth.ExpiredIdTokenError:
        raise _unauthorized("Token expired")
    except firebase_auth.RevokedIdTokenError:
        raise _unauthorized("Session revoked")
    except Exception:
        raise _unauthorized("Invalid authentication token")

    uid = decoded.get("uid")
    if not uid:
        raise _unauthorized("Invalid token payload")
    return uid


def get_current_user(uid: str = Depends(get_token_uid), db=Depends(get_db)) -> Dict:
    """
    Token + live session + user document.
    The returned dict is the `users/{uid}` document with `id` added.
    """
    if sessions.get(db, uid) is None:
        raise _unauthorized("Session expired, please login again")

    user = users.get(db, uid)
    if user is None:
        raise _unauthorized("User not found")
    return user


def require_seller(current_user: dict = Depends(get_current_user)) -> Dict:
    """Only seller accounts pass."""
    if current_user.get("role") != "seller":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Seller account required"
        )
    return current_user
