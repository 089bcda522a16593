"""
Contact Form API Endpoint
"""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from typing import Optional

from storefront.api.dependencies import get_store_context, render_outcome
from storefront.commerce.catalog import post_lead
from storefront.commerce.context import StoreContext

router = APIRouter(prefix="/api/leads", tags=["leads"])

class Lead(BaseModel):
    """Contact form submission"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    subject: Optional[str] = None
    message: str

@router.post("")
async def submit_lead(lead: Lead, response: Response, ctx: StoreContext = Depends(get_store_context)):
    """Submit a lead from the contact form"""
    result = await post_lead(ctx, lead.model_dump())
    return render_outcome(result, response)
