"""
Cart API Endpoints
"""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from typing import Any, Optional

from storefront.api.dependencies import get_store_context, render_outcome
from storefront.commerce.cart import add_cart_item, get_cart
from storefront.commerce.context import StoreContext

router = APIRouter(prefix="/api/cart", tags=["cart"])

class CartItem(BaseModel):
    """Item to add to the cart"""
    product_id: Optional[str] = None
    variant_id: Optional[str] = None
    quantity: Optional[int] = None
    options: Optional[Any] = None

@router.get("")
async def read_cart(ctx: StoreContext = Depends(get_store_context)):
    """Get the visitor's cart, or an empty object if there is none yet"""
    cart = await get_cart(ctx)
    return cart.model_dump(exclude_none=True) if cart else {}

@router.post("/items")
async def add_item(item: CartItem, response: Response, ctx: StoreContext = Depends(get_store_context)):
    """Add item to cart, creating the cart on first use"""
    cart = await get_cart(ctx, create_if_none_found=True)
    if cart is None:
        response.status_code = 503
        return {"detail": "Cart could not be created"}

    result = await add_cart_item(ctx, cart, item.model_dump())
    return render_outcome(result, response)
