"""
ekart/services/cart.py - Cart mutations and the populated cart view.

Quantities are bounded by the product's stock at the moment of the mutation; they
are not re-validated when stock changes later (checkout re-checks every line).
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from ekart.repositories import carts as carts_repo
from ekart.repositories import products as products_repo
from ekart.services.catalog import get_active_product, money
from ekart.utils.timestamps import utcnow

logger = logging.getLogger("ekart.cart")


def _find_line(items: List[Dict[str, Any]], product_id: str) -> Optional[Dict[str, Any]]:
    return next((it for it in items if it.get("product_id") == product_id), None)


def _ensure_stock(product: Dict[str, Any], quantity: int) -> None:
    stock = int(product.get("stock", 0))
    if quantity > stock:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {stock} item(s) of {product.get('name', 'this product')} available in stock",
        )


def add_item(db, buyer_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
    """Create a line or grow an existing one."""
    product = get_active_product(db, product_id)
    cart = carts_repo.load(db, buyer_id)
    items = cart["items"]

    line = _find_line(items, product_id)
    new_qty = (int(line.get("quantity", 0)) if line else 0) + quantity
    _ensure_stock(product, new_qty)

    if line:
        line["quantity"] = new_qty
    else:
        items.append({"product_id": product_id, "quantity": quantity, "added_at": utcnow()})
    carts_repo.save(db, buyer_id, cart)
    return cart_details(db, buyer_id)


def set_quantity(db, buyer_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
    """Overwrite a line's quantity; 0 removes the line."""
    cart = carts_repo.load(db, buyer_id)
    items = cart["items"]

    if quantity == 0:
        cart["items"] = [it for it in items if it.get("product_id") != product_id]
        carts_repo.save(db, buyer_id, cart)
        return cart_details(db, buyer_id)

    product = get_active_product(db, product_id)
    _ensure_stock(product, quantity)

    line = _find_line(items, product_id)
    if line:
        line["quantity"] = quantity
    else:
        items.append({"product_id": product_id, "quantity": quantity, "added_at": utcnow()})
    carts_repo.save(db, buyer_id, cart)
    return cart_details(db, buyer_id)


def remove_item(db, buyer_id: str, product_id: str) -> Dict[str, Any]:
    cart = carts_repo.load(db, buyer_id)
    before = len(cart["items"])
    cart["items"] = [it for it in cart["items"] if it.get("product_id") != product_id]
    if len(cart["items"]) == before:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found in cart")
    carts_repo.save(db, buyer_id, cart)
    logger.debug("Removed %s from cart of %s", product_id, buyer_id)
    return cart_details(db, buyer_id)


def clear(db, buyer_id: str) -> Dict[str, Any]:
    carts_repo.clear(db, buyer_id)
    logger.info("Cart of %s cleared", buyer_id)
    return cart_details(db, buyer_id)


def cart_details(db, buyer_id: str) -> Dict[str, Any]:
    """
    Cart lines populated with the current product fields.
    A deleted product shows as `product: None` and does not count towards the totals.
    """
    cart = carts_repo.load(db, buyer_id)

    items_out: List[Dict[str, Any]] = []
    total_qty = 0
    total_amount = Decimal("0")
    for it in cart["items"]:
        pid = str(it.get("product_id", "")).strip()
        qty = int(it.get("quantity", 0) or 0)
        if not pid or qty <= 0:
            continue

        p = products_repo.get(db, pid)
        if not p:
            items_out.append({"product_id": pid, "quantity": qty, "product": None, "line_total": 0.0})
            continue

        subtotal = money(p.get("price")) * qty
        total_qty += qty
        total_amount += subtotal
        items_out.append({
            "product_id": pid,
            "quantity": qty,
            "product": {
                "id": pid,
                "name": p.get("name", ""),
                "price": float(money(p.get("price"))),
                "images": p.get("images", []) or [],
                "stock": int(p.get("stock", 0)),
                "seller_id": p.get("seller_id", ""),
            },
            "line_total": float(subtotal),
        })

    return {
        "buyer_id": buyer_id,
        "items": items_out,
        "total_quantity": total_qty,
        "total_amount": float(total_amount),
    }
