"""
Checkout workflow
Shipping -> Billing -> Order, driven by the step the storefront submits
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Union
import logging

from storefront.config import settings
from storefront.commerce.account import find_account_by_email
from storefront.commerce.cart import get_shipping_service
from storefront.commerce.context import StoreContext
from storefront.commerce.models import Account, Cart, Done, Failed, Order, Outcome, parse_record
from storefront.commerce.validation import INVALID, Group, validate_fields
from storefront.schema.client import SchemaApiError, has_errors

logger = logging.getLogger(__name__)

class CheckoutStep(str, Enum):
    """Checkout steps in the order they are submitted"""
    SHIPPING = "shipping"
    BILLING = "billing"

SHIPPING_REQUIRED = [
    Group("shipping", ["name", "address1", "city", "zip", "country"]),
    Group("account", ["email"])
]

BILLING_REQUIRED = [
    Group("billing", ["name", "address1", "city", "zip", "country", "method"])
]

SHIPPING_FIELDS = [
    "name", "address1", "address2",
    "city", "state", "zip", "country", "phone",
    "account_address_id"
]

# Card details arrive already tokenized by the payment gateway
BILLING_FIELDS = [
    "name", "address1", "address2",
    "city", "state", "zip", "country", "phone",
    "method", "card", "account_card_id"
]

def _pick(source: Mapping[str, Any], fields: List[str]) -> Dict[str, Any]:
    return {field: source[field] for field in fields if source.get(field) is not None}

def _invalid_sections(data: Mapping[str, Any], sections: List[str]) -> Dict[str, Dict[str, str]]:
    """Sections submitted as something other than a mapping of fields"""
    return {
        section: INVALID.model_dump()
        for section in sections
        if data.get(section) is not None and not isinstance(data[section], Mapping)
    }

async def checkout(
    ctx: StoreContext,
    cart: Cart,
    step: Union[CheckoutStep, str],
    data: Mapping[str, Any]
) -> Outcome:
    """
    Handle a submitted checkout step

    Args:
        ctx: Current request context
        cart: Cart being checked out
        step: Which step the submission belongs to
        data: Submitted form data

    Returns:
        Done with a redirect to the next step (or the receipt), or Failed
    """
    step = CheckoutStep(step)

    if step == CheckoutStep.SHIPPING:
        return await update_cart_shipping(ctx, cart, data)

    result = await update_cart_billing(ctx, cart, data)
    if isinstance(result, Failed):
        return result

    # Convert cart to order on final step
    order = await convert_cart(ctx, cart)
    if isinstance(order, Failed):
        return order

    return Done(redirect=f"{settings.RECEIPT_PATH}/{order.number}")

async def update_cart_shipping(ctx: StoreContext, cart: Cart, data: Mapping[str, Any]) -> Outcome:
    """
    Update cart shipping details and attach the account matching the submitted email
    """
    errors = {**_invalid_sections(data, ["shipping", "account"]), **validate_fields(data, SHIPPING_REQUIRED)}
    if errors:
        return Failed(errors=errors)

    update: Dict[str, Any] = {}

    shipping = data.get("shipping") or {}
    shipping_update = _pick(shipping, SHIPPING_FIELDS)
    if shipping.get("service") is not None:
        # Set shipping price from cart shipment rating
        service = get_shipping_service(cart, shipping["service"])
        if service.price is not None:
            shipping_update["service"] = service.id
            shipping_update["price"] = service.price
        else:
            shipping_update["service"] = None
            shipping_update["price"] = None
    if shipping_update:
        update["shipping"] = shipping_update

    account = data.get("account") or {}
    if account.get("email") is not None:
        existing = await find_account_by_email(ctx, account["email"])
        if existing:
            if cart.account_id and cart.account_id != existing.id:
                # Clear shipping/billing info when switching accounts
                await ctx.put("/carts/{id}", {"id": cart.id, "shipping": None, "billing": None})
            update["account_id"] = existing.id
        else:
            created = parse_record(await ctx.post("/accounts", {
                "email": account["email"],
                "phone": shipping.get("phone")
            }), Account)
            if isinstance(created, Failed):
                return created
            update["account_id"] = created.id

    for key in ("coupon_code", "comments"):
        if data.get(key) is not None:
            update[key] = data[key]

    updated = parse_record(await ctx.put("/carts/{id}", {"id": cart.id, **update}), Cart)
    if isinstance(updated, Failed):
        return updated

    await sync_account_default(ctx, updated, "shipping", "account_address_id")

    return Done(redirect=settings.CHECKOUT_BILLING_PATH)

async def update_cart_billing(ctx: StoreContext, cart: Cart, data: Mapping[str, Any]) -> Outcome:
    """Update cart billing details"""
    errors = {**_invalid_sections(data, ["billing"]), **validate_fields(data, BILLING_REQUIRED)}
    if errors:
        return Failed(errors=errors)

    update: Dict[str, Any] = {}
    billing_update = _pick(data.get("billing") or {}, BILLING_FIELDS)
    if billing_update:
        update["billing"] = billing_update

    updated = parse_record(await ctx.put("/carts/{id}", {"id": cart.id, **update}), Cart)
    if isinstance(updated, Failed):
        return updated

    await sync_account_default(ctx, updated, "billing", "account_card_id")

    return Done()

async def sync_account_default(ctx: StoreContext, cart: Cart, section: str, key: str) -> None:
    """
    Make the address or card chosen on the cart the account's default

    Best effort: failures are logged and never block checkout.

    Args:
        ctx: Current request context
        cart: Cart after the update was applied
        section: "shipping" or "billing"
        key: "account_address_id" or "account_card_id"
    """
    cart_value = (getattr(cart, section) or {}).get(key)
    if not cart_value:
        return

    try:
        account = cart.account
        if account is None and cart.account_id:
            account = await ctx.get("/accounts/{id}", {"id": cart.account_id})
        if not account or has_errors(account):
            return

        account_value = (account.get(section) or {}).get(key)
        if account_value == cart_value:
            return

        result = await ctx.put("/accounts/{id}", {
            "id": cart.account_id or account.get("id"),
            section: {key: cart_value}
        })
    except SchemaApiError as e:
        logger.warning("Could not update default %s for account: %s", section, e)
        return

    if has_errors(result):
        logger.warning("Could not update default %s for account: %s", section, result["errors"])

async def convert_cart(ctx: StoreContext, cart: Cart) -> Union[Order, Failed]:
    """
    Convert cart to order and update session accordingly

    On success the cart is removed from the session and the order's account is
    logged in. On failure nothing changes, so the step can be resubmitted.
    """
    order = parse_record(await ctx.post("/orders", {"cart_id": cart.id}), Order)
    if isinstance(order, Failed):
        return order

    await ctx.put_session({
        "cart_id": None,
        "account_id": order.account_id
    })
    logger.info("Cart %s converted to order %s", cart.id, order.number)
    return order
