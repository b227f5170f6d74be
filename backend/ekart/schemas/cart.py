"""
ekart/schemas/cart.py - Pydantic models for Cart.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


def _clean_pid(v: str) -> str:
    v = (v or "").strip()
    for ch in ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0"):
        v = v.replace(ch, "")
    if not v:
        raise ValueError("productId cannot be empty")
    return v


class AddItemBody(BaseModel):
    """Add `quantity` of a product; an existing line grows."""
    productId: str = Field(..., description="Product ID")
    quantity: int = Field(1, ge=1, le=10000, description="Quantity (>=1)")

    @field_validator("productId")
    @classmethod
    def clean_product_id(cls, v: str) -> str:
        return _clean_pid(v)


class SetQuantityBody(BaseModel):
    """Overwrite a line's quantity; 0 removes the line."""
    productId: str = Field(..., description="Product ID")
    quantity: int = Field(..., ge=0, le=10000, description="New quantity (0 removes the line)")

    @field_validator("productId")
    @classmethod
    def clean_product_id(cls, v: str) -> str:
        return _clean_pid(v)


class CartProduct(BaseModel):
    id: str
    name: str
    price: float
    images: List[str] = []
    stock: int
    seller_id: str


class CartLineOut(BaseModel):
    product_id: str
    quantity: int
    product: Optional[CartProduct] = None  # None when the product was deleted
    line_total: float = 0.0


class CartOut(BaseModel):
    buyer_id: str
    items: List[CartLineOut] = Field(default_factory=list)
    total_quantity: int = 0
    total_amount: float = 0.0
