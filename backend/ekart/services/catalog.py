"""
ekart/services/catalog.py - Product catalog queries.

Equality filters (`is_active`, `category`, `seller_id`) run in Firestore; price range,
text search, stock filter, sorting and pagination run on the fetched page set, which
keeps every query answerable without composite indexes.
"""
import math
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from ekart.repositories import products as products_repo
from ekart.schemas.product import normalize_category
from ekart.utils.timestamps import created_ts

_SORTERS = {
    "newest": (created_ts, True),
    "oldest": (created_ts, False),
    "price_asc": (lambda p: float(p.get("price", 0)), False),
    "price_desc": (lambda p: float(p.get("price", 0)), True),
    "name": (lambda p: str(p.get("name", "")).lower(), False),
}


def money(value: Any) -> Decimal:
    return Decimal(str(value or 0))


def _matches(p: Dict[str, Any], search: Optional[str], min_price: Optional[float],
             max_price: Optional[float], in_stock: bool) -> bool:
    price = float(p.get("price", 0))
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    if in_stock and int(p.get("stock", 0)) <= 0:
        return False
    if search:
        needle = search.lower()
        haystack = f"{p.get('name', '')} {p.get('description', '')}".lower()
        if needle not in haystack:
            return False
    return True


def list_products(
    db,
    *,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    seller_id: Optional[str] = None,
    in_stock: bool = True,
    sort: str = "newest",
    page: int = 1,
    limit: int = 12,
) -> Dict[str, Any]:
    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="min_price cannot exceed max_price")

    category = normalize_category(category) if category else None
    search = (search or "").strip() or None
    docs = products_repo.list_active(db, category=category, seller_id=seller_id)
    matched = [p for p in docs if _matches(p, search, min_price, max_price, in_stock)]

    key, reverse = _SORTERS[sort]
    matched.sort(key=key, reverse=reverse)

    total = len(matched)
    start = (page - 1) * limit
    return {
        "products": matched[start:start + limit],
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }


def get_active_product(db, product_id: str) -> Dict[str, Any]:
    product = products_repo.get(db, product_id)
    if not product or not product.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def list_categories(db) -> List[str]:
    return sorted({p["category"] for p in products_repo.list_active(db) if p.get("category")})
