"""
ekart/routers/carts.py
Cart endpoints for logged-in users (`/market/cart`).

- POST   /market/cart               add quantity (new line or grow an existing one)
- PUT    /market/cart               set a line's quantity (0 removes it)
- DELETE /market/cart/{product_id}  remove one line
- DELETE /market/cart               empty the cart
- GET    /market/cart               populated cart with line totals

Every mutation answers with the populated cart. Quantities above the product's
current stock are rejected with 400 and the available count.
"""
from fastapi import APIRouter, Depends

from ekart.config import get_db
from ekart.core.security import get_current_user
from ekart.schemas.cart import AddItemBody, CartOut, SetQuantityBody
from ekart.services import cart as svc

router = APIRouter(prefix="/market/cart", tags=["Cart"])


@router.get("", response_model=CartOut)
def get_cart(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    return svc.cart_details(db, current_user["id"])


@router.post("", response_model=CartOut)
def add_to_cart(payload: AddItemBody, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    return svc.add_item(db, current_user["id"], payload.productId, payload.quantity)


@router.put("", response_model=CartOut)
def update_cart(payload: SetQuantityBody, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    return svc.set_quantity(db, current_user["id"], payload.productId, payload.quantity)


@router.delete("/{product_id}", response_model=CartOut)
def remove_cart_item(product_id: str, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    return svc.remove_item(db, current_user["id"], product_id)


@router.delete("", response_model=CartOut)
def clear_cart(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    return svc.clear(db, current_user["id"])
