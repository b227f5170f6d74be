"""
ekart/schemas/order.py - Pydantic models for orders and seller sales history.

Order items are a snapshot of the product at purchase time (name, price, image),
so historical orders do not change when a product is edited or deleted.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["placed", "shipped", "delivered", "cancelled"]


class ShippingAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None


class OrderItem(BaseModel):
    product_id: str
    seller_id: str
    name: str
    price: float
    quantity: int = Field(..., gt=0)
    image: str = ""


class OrderOut(BaseModel):
    id: str
    buyer_id: str
    shipping_address: Optional[ShippingAddress] = None
    items: List[OrderItem] = Field(default_factory=list)
    total_amount: float
    status: OrderStatus = "placed"
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderList(BaseModel):
    message: Optional[str] = None
    orders: List[OrderOut] = Field(default_factory=list)


class PlaceOrderResponse(BaseModel):
    success: bool = True
    message: str = "Order placed!"
    order_id: str
    total_amount: float


class SaleBuyer(BaseModel):
    id: str
    userName: Optional[str] = None
    email: Optional[str] = None


class SellerSale(BaseModel):
    order_id: str
    buyer: SaleBuyer
    date: Optional[datetime] = None
    status: OrderStatus
    items_sold: List[OrderItem]
    total_earnings: float
