"""
Cart workflow
Resolves the visitor's cart from the session, creating it lazily
"""
from typing import Any, Mapping, Optional, Union
import logging

from storefront.commerce.context import StoreContext
from storefront.commerce.models import Cart, Failed, ShippingService, load_record, parse_record
from storefront.schema.client import has_errors

logger = logging.getLogger(__name__)

async def _create_cart(ctx: StoreContext, account_id: Optional[str]) -> Optional[dict]:
    """Create a cart and save its id to the session"""
    cart = await ctx.post("/carts", {"account_id": account_id})
    if not cart or has_errors(cart):
        logger.warning("Could not create cart: %s", (cart or {}).get("errors"))
        return None
    await ctx.put_session({"cart_id": cart["id"]})
    return cart

async def get_cart(ctx: StoreContext, create_if_none_found: bool = False) -> Optional[Cart]:
    """
    Get cart from session

    Args:
        ctx: Current request context
        create_if_none_found: Create a new cart when the session has none (or it no longer exists)

    Returns:
        Cart, or None when no cart is resolvable
    """
    session = await ctx.get_session()
    account_id = session.account_id

    cart = None
    if session.cart_id:
        cart = await ctx.get("/carts/{id}", {"id": session.cart_id})
        if has_errors(cart):
            cart = None

    if not cart and create_if_none_found:
        cart = await _create_cart(ctx, account_id)

    if not cart:
        return None

    # Attach account after login
    if not cart.get("account_id") and account_id:
        updated = await ctx.put("/carts/{id}", {"id": cart["id"], "account_id": account_id})
        if updated and not has_errors(updated):
            cart = updated

    return load_record(cart, Cart)

async def add_cart_item(ctx: StoreContext, cart: Cart, item: Mapping[str, Any]) -> Union[Cart, Failed]:
    """
    Add an item to a cart
    Remote validation errors (e.g. out of stock) are returned as-is
    """
    result = await ctx.post("/carts/{id}/items", {
        "id": cart.id,
        "product_id": item.get("product_id"),
        "variant_id": item.get("variant_id"),
        "quantity": item.get("quantity"),
        "options": item.get("options")
    })
    return parse_record(result, Cart)

def get_shipping_service(
    cart: Cart,
    service_id: str,
    service_price: Optional[float] = None
) -> ShippingService:
    """
    Get shipping service details from the cart's shipment rating

    A service that is no longer offered comes back with service_price (None by
    default), so a stale price is never kept.
    """
    service_id = str(service_id)
    services = cart.shipment_rating.services if cart.shipment_rating else []
    for service in services:
        if service.id == service_id:
            return ShippingService(id=service_id, name=service.name, price=service.price)
    return ShippingService(id=service_id, name=service_id, price=service_price)
