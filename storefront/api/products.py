"""
Product API Endpoints
Handles product and category retrieval from the Schema catalog
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from storefront.api.dependencies import get_store_context
from storefront.commerce import catalog
from storefront.commerce.context import StoreContext

router = APIRouter(prefix="/api", tags=["products"])

@router.get("/products/{product_id}")
async def get_product(product_id: str, ctx: StoreContext = Depends(get_store_context)):
    """Get product details by ID or slug"""
    product = await catalog.get_product(ctx, product_id)

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    return product

@router.get("/products/{product_id}/related")
async def get_related_products(
    product_id: str,
    category_id: Optional[str] = None,
    limit: int = 5,
    ctx: StoreContext = Depends(get_store_context)
):
    """Get products related to a product, optionally within a category"""
    return await catalog.get_related_products(ctx, product_id, category_id, limit) or {"results": []}

@router.get("/categories/{category_id}/products")
async def get_category_products(category_id: str, ctx: StoreContext = Depends(get_store_context)):
    """Get products in a category"""
    products = await catalog.get_category_products(ctx, category_id)

    if products is None:
        raise HTTPException(status_code=404, detail="Category not found")

    return products
