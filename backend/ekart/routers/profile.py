"""
ekart/routers/profile.py
Market profile (`/market/profile`): shipping address for buyers, business details for sellers.

- GET /market/profile   profile + account summary + own orders (newest first)
- PUT /market/profile   upsert; only the fields sent change
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ekart.config import get_db
from ekart.core.security import get_current_user
from ekart.repositories import orders as orders_repo
from ekart.repositories import profiles as profiles_repo
from ekart.schemas.profile import MarketProfileOut, ProfileOut, ProfileUpdate

router = APIRouter(prefix="/market/profile", tags=["Profile"])


@router.get("", response_model=MarketProfileOut)
def get_market_profile(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    uid = current_user["id"]
    profile = profiles_repo.get(db, uid)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail="Market profile not found. Please update profile.")
    return {
        **profile,
        "user": {
            "id": uid,
            "userName": current_user.get("user_name", ""),
            "email": current_user.get("email", ""),
            "role": current_user.get("role", "buyer"),
            "profileImage": current_user.get("profile_image"),
        },
        "orders": orders_repo.list_for_buyer(db, uid),
    }


@router.put("", response_model=ProfileOut)
def update_market_profile(payload: ProfileUpdate, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    patch = payload.model_dump(exclude_none=True)
    return profiles_repo.upsert(db, current_user["id"], patch)
