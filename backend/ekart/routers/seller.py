"""
# `ekart/routers/seller.py` - Seller inventory & sales (`/market/seller`)

All endpoints require a seller account (403 otherwise).

| Endpoint | Purpose |
|---|---|
| `POST /market/seller/product` | Create a listing (multipart form + optional `image`) |
| `PUT /market/seller/product/{id}` | Partial update; a new `image` replaces the images |
| `DELETE /market/seller/product/{id}` | Delete an own listing |
| `GET /market/seller/my-products` | Own listings, newest first |
| `GET /market/seller/history` | Orders containing own items, with per-order earnings |

Product names are unique per seller (400 on duplicates). Products of other sellers
answer 404.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from ekart.config import get_bucket, get_db
from ekart.core.security import require_seller
from ekart.schemas.order import SellerSale
from ekart.schemas.product import ProductCreate, ProductOut, ProductUpdate
from ekart.services import seller as svc

router = APIRouter(prefix="/market/seller", tags=["Seller"])


def _file_or_none(image: Optional[UploadFile]) -> Optional[UploadFile]:
    return image if image is not None and image.filename else None


@router.post("/product", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    product_in: ProductCreate = Depends(ProductCreate.as_form),
    image: Optional[UploadFile] = File(None, description="Product image (jpeg / png / svg)"),
    seller: dict = Depends(require_seller),
    db=Depends(get_db),
    bucket=Depends(get_bucket),
):
    return svc.create_product(db, bucket, seller["id"], product_in, _file_or_none(image))


@router.put("/product/{product_id}", response_model=ProductOut)
def edit_product(
    product_id: str,
    product_in: ProductUpdate = Depends(ProductUpdate.as_form),
    image: Optional[UploadFile] = File(None, description="Replaces the current images"),
    seller: dict = Depends(require_seller),
    db=Depends(get_db),
    bucket=Depends(get_bucket),
):
    return svc.update_product(db, bucket, seller["id"], product_id, product_in, _file_or_none(image))


@router.delete("/product/{product_id}")
def delete_product(product_id: str, seller: dict = Depends(require_seller), db=Depends(get_db)):
    svc.delete_product(db, seller["id"], product_id)
    return {"success": True, "message": "Product deleted"}


@router.get("/my-products", response_model=List[ProductOut])
def my_products(seller: dict = Depends(require_seller), db=Depends(get_db)):
    return svc.my_products(db, seller["id"])


@router.get("/history", response_model=List[SellerSale])
def seller_history(seller: dict = Depends(require_seller), db=Depends(get_db)):
    return svc.sales_history(db, seller["id"])
