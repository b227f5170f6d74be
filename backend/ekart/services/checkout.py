"""
ekart/services/checkout.py - Order placement.

Flow
- The cart must hold at least one line and the buyer's profile must have `address.street`.
- One Firestore transaction reads the cart and every product, validates all lines, and
  only then decrements stock, writes the order and empties the cart. Any failed line
  aborts the whole transaction, so no stock is touched.
- Concurrent checkouts on the same product conflict inside Firestore and are retried
  against fresh stock values.

The order embeds a snapshot (name, price, first image, seller) of every line and
`total_amount = Σ price × quantity`, computed once here.
"""
import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from fastapi import HTTPException, status
from firebase_admin import firestore

from ekart.repositories import carts as carts_repo
from ekart.repositories import orders as orders_repo
from ekart.repositories import products as products_repo
from ekart.repositories import profiles as profiles_repo
from ekart.services.catalog import money

logger = logging.getLogger("ekart.checkout")

EMPTY_CART = "Cart is empty"
MISSING_ADDRESS = "Please complete your Market Profile (Address) before buying!"
MISSING_PRODUCT = "One or more items in your cart no longer exist."


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _snapshot_line(product_id: str, product: Dict[str, Any], quantity: int) -> Dict[str, Any]:
    images = product.get("images") or []
    return {
        "product_id": product_id,
        "seller_id": product.get("seller_id", ""),
        "name": product.get("name", ""),
        "price": float(money(product.get("price"))),
        "quantity": quantity,
        "image": images[0] if images else "",
    }


def _place_order_in_transaction(transaction, db, buyer_id: str, address: Dict[str, Any], order_ref) -> float:
    # Firestore transactions require every read before the first write
    cart_ref = carts_repo.ref(db, buyer_id)
    cart_snap = cart_ref.get(transaction=transaction)
    cart_items = (cart_snap.to_dict() or {}).get("items", []) if cart_snap.exists else []
    if not cart_items:
        raise _bad_request(EMPTY_CART)

    reads: List[Tuple[Any, Any, int]] = []
    for it in cart_items:
        product_ref = products_repo.ref(db, str(it.get("product_id", "")))
        reads.append((product_ref, product_ref.get(transaction=transaction), int(it.get("quantity", 0))))

    order_items: List[Dict[str, Any]] = []
    stock_updates: List[Tuple[Any, int]] = []
    total = Decimal("0")
    for product_ref, snap, qty in reads:
        product = snap.to_dict() if snap.exists else None
        if not product or not product.get("is_active", True):
            raise _bad_request(MISSING_PRODUCT)

        stock = int(product.get("stock", 0))
        if stock < qty:
            raise _bad_request(f"Item {product.get('name', '')} is out of stock")

        stock_updates.append((product_ref, stock - qty))
        total += money(product.get("price")) * qty
        order_items.append(_snapshot_line(snap.id, product, qty))

    for product_ref, new_stock in stock_updates:
        transaction.update(product_ref, {"stock": new_stock, "updated_at": firestore.SERVER_TIMESTAMP})

    transaction.set(order_ref, {
        "buyer_id": buyer_id,
        "shipping_address": address,
        "items": order_items,
        "seller_ids": sorted({it["seller_id"] for it in order_items}),
        "total_amount": float(total),
        "status": "placed",
        "payment_id": f"DEMO_{int(time.time() * 1000)}",
        "created_at": firestore.SERVER_TIMESTAMP,
    })
    transaction.set(cart_ref, {"buyer_id": buyer_id, "items": []})
    return float(total)


def place_order(db, buyer_id: str) -> Dict[str, Any]:
    """Check out the buyer's cart. Returns `{"order_id", "total_amount"}`."""
    cart = carts_repo.load(db, buyer_id)
    if not cart["items"]:
        raise _bad_request(EMPTY_CART)

    profile = profiles_repo.get(db, buyer_id) or {}
    address = profile.get("address") or {}
    if not address.get("street"):
        raise _bad_request(MISSING_ADDRESS)

    order_ref = orders_repo.new_ref(db)
    run = firestore.transactional(_place_order_in_transaction)
    total = run(db.transaction(), db, buyer_id, address, order_ref)

    logger.info("Order %s placed by %s: %d line(s), total %.2f",
                order_ref.id, buyer_id, len(cart["items"]), total)
    return {"order_id": order_ref.id, "total_amount": total}
