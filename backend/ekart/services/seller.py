"""
ekart/services/seller.py - Seller inventory and sales history.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile, status

from ekart.repositories import orders as orders_repo
from ekart.repositories import products as products_repo
from ekart.repositories import users as users_repo
from ekart.schemas.product import ProductCreate, ProductUpdate
from ekart.services.catalog import money
from ekart.services.storage import upload_image
from ekart.utils.timestamps import newest_first

logger = logging.getLogger("ekart.seller")


def _owned_product(db, seller_id: str, product_id: str) -> Dict[str, Any]:
    product = products_repo.get(db, product_id)
    if not product or product.get("seller_id") != seller_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def _ensure_unique_name(db, seller_id: str, name: str, exclude_id: Optional[str] = None) -> None:
    existing = products_repo.find_by_seller_and_name(db, seller_id, name)
    if existing and existing["id"] != exclude_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product with this name already exists.")


def create_product(db, bucket, seller_id: str, product_in: ProductCreate,
                   image: Optional[UploadFile] = None) -> Dict[str, Any]:
    _ensure_unique_name(db, seller_id, product_in.name)

    product_ref = products_repo.ref(db)
    images = [upload_image(bucket, image, f"products/{product_ref.id}")] if image else []

    data = product_in.model_dump()
    data.update(seller_id=seller_id, images=images)
    product = products_repo.create(db, product_ref, data)
    logger.info("Seller %s created product %s (%s)", seller_id, product["id"], product["name"])
    return product


def update_product(db, bucket, seller_id: str, product_id: str, product_in: ProductUpdate,
                   image: Optional[UploadFile] = None) -> Dict[str, Any]:
    _owned_product(db, seller_id, product_id)

    patch = product_in.model_dump(exclude_none=True)
    if "name" in patch:
        _ensure_unique_name(db, seller_id, patch["name"], exclude_id=product_id)
    if image is not None:
        # a new image replaces the current list
        patch["images"] = [upload_image(bucket, image, f"products/{product_id}")]

    product = products_repo.update(db, product_id, patch)
    logger.info("Seller %s updated product %s: %s", seller_id, product_id, sorted(patch))
    return product


def delete_product(db, seller_id: str, product_id: str) -> None:
    _owned_product(db, seller_id, product_id)
    products_repo.delete(db, product_id)
    logger.info("Seller %s deleted product %s", seller_id, product_id)


def my_products(db, seller_id: str) -> List[Dict[str, Any]]:
    return newest_first(products_repo.list_by_seller(db, seller_id))


def sales_history(db, seller_id: str) -> List[Dict[str, Any]]:
    """
    One entry per order that contains this seller's items, newest first.
    Only the seller's own lines are listed and summed.
    """
    history = []
    buyers: Dict[str, Optional[Dict[str, Any]]] = {}
    for order in orders_repo.list_for_seller(db, seller_id):
        my_items = [it for it in order.get("items", []) if it.get("seller_id") == seller_id]
        if not my_items:
            continue

        buyer_id = order.get("buyer_id", "")
        if buyer_id not in buyers:
            buyers[buyer_id] = users_repo.get(db, buyer_id)
        buyer = buyers[buyer_id] or {}

        earnings = sum((money(it.get("price")) * int(it.get("quantity", 0)) for it in my_items), Decimal("0"))
        history.append({
            "order_id": order["id"],
            "buyer": {"id": buyer_id, "userName": buyer.get("user_name"), "email": buyer.get("email")},
            "date": order.get("created_at"),
            "status": order.get("status", "placed"),
            "items_sold": my_items,
            "total_earnings": float(earnings),
        })
    return history
