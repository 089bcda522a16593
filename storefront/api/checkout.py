"""
Checkout API Endpoints
Shipping and billing submissions; billing places the order
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Response
from typing import Any, Dict

from storefront.api.dependencies import get_store_context, render_outcome
from storefront.commerce.cart import get_cart
from storefront.commerce.catalog import get_card_gateway
from storefront.commerce.checkout import CheckoutStep, checkout
from storefront.commerce.context import StoreContext

router = APIRouter(prefix="/api/checkout", tags=["checkout"])

@router.get("")
async def start_checkout(ctx: StoreContext = Depends(get_store_context)):
    """Get the cart being checked out, creating one on entry"""
    cart = await get_cart(ctx, create_if_none_found=True)
    if cart is None:
        raise HTTPException(status_code=503, detail="Cart could not be created")
    return cart.model_dump(exclude_none=True)

@router.get("/card-gateway")
async def card_gateway(ctx: StoreContext = Depends(get_store_context)):
    """Get card gateway settings for the payment form"""
    return await get_card_gateway(ctx)

@router.post("/{step}")
async def submit_step(
    step: CheckoutStep,
    response: Response,
    data: Dict[str, Any] = Body(...),
    ctx: StoreContext = Depends(get_store_context)
):
    """
    Submit a checkout step

    Returns {ok, redirect} on success or {errors} with status 422
    """
    cart = await get_cart(ctx)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")

    result = await checkout(ctx, cart, step, data)
    return render_outcome(result, response)
