"""
ekart/schemas/profile.py - Pydantic models for the market profile.

A profile holds the buyer's shipping address and the seller's business fields.
Checkout requires `address.street`.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ekart.schemas.order import OrderOut


class Address(BaseModel):
    street: Optional[str] = Field(None, description="Street and house number")
    city: Optional[str] = None
    zip: Optional[str] = Field(None, description="Postal code")
    country: Optional[str] = None
    phone: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Only the fields sent are written."""
    address: Optional[Address] = None
    business_name: Optional[str] = Field(None, max_length=120)
    gst_number: Optional[str] = Field(None, max_length=32)


class ProfileOut(BaseModel):
    user_id: str
    address: Optional[Address] = None
    business_name: Optional[str] = None
    gst_number: Optional[str] = None
    seller_rating: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUser(BaseModel):
    id: str
    userName: str
    email: str
    role: str
    profileImage: Optional[str] = None


class MarketProfileOut(ProfileOut):
    user: ProfileUser
    orders: List[OrderOut] = Field(default_factory=list)
