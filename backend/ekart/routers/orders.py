"""
ekart/routers/orders.py
Checkout and buyer order history.

- POST /market/buy                 place an order from the cart (201)
- GET  /market/orders              own orders, newest first
- GET  /market/orders/{order_id}   one own order
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ekart.config import get_db
from ekart.core.security import get_current_user
from ekart.repositories import orders as orders_repo
from ekart.schemas.order import OrderList, OrderOut, PlaceOrderResponse
from ekart.services.checkout import place_order

router = APIRouter(prefix="/market", tags=["Orders"])


@router.post("/buy", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
def buy(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    result = place_order(db, current_user["id"])
    return PlaceOrderResponse(order_id=result["order_id"], total_amount=result["total_amount"])


@router.get("/orders", response_model=OrderList)
def list_my_orders(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    orders = orders_repo.list_for_buyer(db, current_user["id"])
    if not orders:
        return OrderList(message="You have no orders yet.", orders=[])
    return OrderList(orders=orders)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_my_order(order_id: str, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    order = orders_repo.get(db, order_id)
    if not order or order.get("buyer_id") != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order
