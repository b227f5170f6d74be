"""
# `ekart/routers/products.py` - Public catalog (`/market`)

### `GET /market/products`
Active listings only. Optional filters: `category`, `search` (name/description substring),
`min_price`, `max_price`, `seller_id`, `in_stock` (default true).
Sorting: `newest` (default) | `oldest` | `price_asc` | `price_desc` | `name`.
Paging: `page` (1-based), `limit` (1-100).

### `GET /market/products/{product_id}`
404 when the product does not exist or is not active.

### `GET /market/categories`
Sorted distinct categories of active listings.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ekart.config import get_db, settings
from ekart.schemas.product import ProductOut, ProductPage, SortKey
from ekart.services import catalog

router = APIRouter(prefix="/market", tags=["Products"])


@router.get("/products", response_model=ProductPage, summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category name"),
    search: Optional[str] = Query(None, max_length=100, description="Search in name and description"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    seller_id: Optional[str] = Query(None),
    in_stock: bool = Query(True, description="Only products with stock > 0"),
    sort: SortKey = Query("newest"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    db=Depends(get_db),
):
    return catalog.list_products(
        db,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        seller_id=seller_id,
        in_stock=in_stock,
        sort=sort,
        page=page,
        limit=limit,
    )


@router.get("/products/{product_id}", response_model=ProductOut, summary="Get Product")
def get_product(product_id: str, db=Depends(get_db)):
    return catalog.get_active_product(db, product_id)


@router.get("/categories", response_model=List[str], summary="List Categories")
def list_categories(db=Depends(get_db)):
    return catalog.list_categories(db)
