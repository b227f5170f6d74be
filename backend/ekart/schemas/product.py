"""
# `ekart/schemas/product.py` - Product schemas

## Input

### `ProductCreate`
Seller creates a listing (multipart form, `as_form`).
| Field | Type | Required | Notes |
|---|---|---|---|
| name | `str` | ✔ | unique per seller |
| description | `str` | ✔ | |
| price | `float` | ✔ | ≥ 0 |
| category | `str` | ✔ | trimmed, lower-cased |
| stock | `int` | ✔ | ≥ 0 |
| is_active | `bool` | ✖ | default `true` |

### `ProductUpdate`
Same fields, all optional (`as_form`). A new image replaces the image list.

## Output

### `ProductOut`
Stored product with `id`, `seller_id`, `images`, timestamps.

### `ProductPage`
`GET /market/products` response: `products`, `page`, `limit`, `total`, `pages`.
"""
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import Form
from pydantic import BaseModel, Field, field_validator

SortKey = Literal["newest", "oldest", "price_asc", "price_desc", "name"]


def normalize_category(v: str) -> str:
    return " ".join((v or "").split()).lower()


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, description="Product name")
    description: str = Field(..., min_length=1, description="Description")
    price: float = Field(..., ge=0, description="Price")
    category: str = Field(..., min_length=1, description="Category")
    stock: int = Field(..., ge=0, description="Stock")
    is_active: bool = Field(True, description="Listed in the catalog?")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("category")
    @classmethod
    def clean_category(cls, v: str) -> str:
        v = normalize_category(v)
        if not v:
            raise ValueError("category cannot be empty")
        return v

    # form-data support
    @classmethod
    def as_form(
        cls,
        name: str = Form(...),
        description: str = Form(...),
        price: float = Form(...),
        category: str = Form(...),
        stock: int = Form(...),
        is_active: bool = Form(True),
    ):
        return cls(
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
            is_active=is_active,
        )


class ProductUpdate(BaseModel):
    """Partial update; only fields sent are written."""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("category")
    @classmethod
    def clean_category(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = normalize_category(v)
        if not v:
            raise ValueError("category cannot be empty")
        return v

    @classmethod
    def as_form(
        cls,
        name: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        price: Optional[float] = Form(None),
        category: Optional[str] = Form(None),
        stock: Optional[int] = Form(None),
        is_active: Optional[bool] = Form(None),
    ):
        return cls(
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
            is_active=is_active,
        )


class ProductOut(BaseModel):
    id: str
    seller_id: str
    name: str
    description: str = ""
    price: float
    category: str
    stock: int
    images: List[str] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProductPage(BaseModel):
    products: List[ProductOut]
    page: int
    limit: int
    total: int
    pages: int
