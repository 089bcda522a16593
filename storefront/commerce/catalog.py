"""
Catalog and store helpers
Products, categories, payment settings and contact leads
"""
from typing import Any, Dict, Mapping, Optional, Union
import logging

from storefront.commerce.context import StoreContext
from storefront.commerce.models import Failed, Record, parse_record

logger = logging.getLogger(__name__)

async def get_product(ctx: StoreContext, id_or_slug: str) -> Optional[Dict]:
    """Get an active product by id or slug"""
    return await ctx.get("/products/{id}", {
        "id": id_or_slug,
        "active": True
    })

async def get_related_products(
    ctx: StoreContext,
    product_id: str,
    category_id: Optional[str] = None,
    limit: int = 5
) -> Optional[Dict]:
    """
    Get products related to a product

    Args:
        ctx: Current request context
        product_id: Product id or slug to exclude
        category_id: Only return products in this category, in category order
        limit: Maximum number of results

    Returns:
        Product collection
    """
    query: Dict[str, Any] = {
        "id": {"$ne": product_id},
        "slug": {"$ne": product_id},
        "active": True,
        "limit": limit
    }
    if category_id:
        category = await ctx.get("/categories/{id}", {"id": category_id})
        if category and category.get("id"):
            query["category_index.id"] = category["id"]
            query["sort"] = f"category_index.sort.{category['id']} ASC"
    # "id" is a filter here, not a path value
    return await ctx.get("/products", query)

async def get_category_products(ctx: StoreContext, category_id: str) -> Optional[Dict]:
    """Get products in a category"""
    return await ctx.get("/categories/{id}/products", {
        "id": category_id,
        "expand": "product"
    })

async def get_card_gateway(ctx: StoreContext) -> Dict[str, Any]:
    """
    Get credit card gateway settings for the storefront payment form

    Returns:
        Gateway settings, with publishable_key resolved for Stripe; empty if cards are not enabled
    """
    payment_settings = await ctx.get("/settings/payments") or {}

    card_method = next(
        (method for method in payment_settings.get("methods") or [] if method.get("id") == "card"),
        None
    )
    if not card_method:
        return {}

    card_gateway = next(
        (gateway for gateway in payment_settings.get("gateways") or []
         if gateway.get("id") == card_method.get("gateway")),
        None
    )
    if not card_gateway:
        logger.warning("Card payments enabled without a configured gateway")
        return {}

    gateway_settings = dict(card_gateway)
    if card_gateway["id"] == "stripe":
        if card_gateway.get("mode") == "live":
            gateway_settings["publishable_key"] = card_gateway.get("live_publishable_key")
        else:
            gateway_settings["publishable_key"] = card_gateway.get("test_publishable_key")
    return gateway_settings

async def post_lead(ctx: StoreContext, lead: Mapping[str, Any]) -> Union[Record, Failed]:
    """Submit a lead from a contact form"""
    result = await ctx.post("/leads", {
        "first_name": lead.get("first_name"),
        "last_name": lead.get("last_name"),
        "email": lead.get("email"),
        "subject": lead.get("subject"),
        "message": lead.get("message"),
        "status": "new"
    })
    return parse_record(result, Record)
