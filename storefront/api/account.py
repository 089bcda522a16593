"""
Account API Endpoints
Registration, login/logout and the logged in account's profile, orders, addresses and cards
"""
from fastapi import APIRouter, Body, Depends, Response
from typing import Any, Dict

from storefront.api.dependencies import get_store_context, render_outcome, require_account
from storefront.commerce import account as accounts
from storefront.commerce.context import StoreContext

router = APIRouter(prefix="/api/account", tags=["account"])

@router.post("")
async def create_account(
    response: Response,
    data: Dict[str, Any] = Body(...),
    ctx: StoreContext = Depends(get_store_context)
):
    """Create an account (or claim a guest account) and log it in"""
    result = await accounts.create_account(ctx, data)
    return render_outcome(result, response)

@router.get("")
async def read_account(ctx: StoreContext = Depends(require_account)):
    """Get the logged in account"""
    account = await accounts.get_account(ctx)
    return account.model_dump(exclude={"password"}, exclude_none=True) if account else {}

@router.put("")
async def update_account(
    response: Response,
    data: Dict[str, Any] = Body(...),
    ctx: StoreContext = Depends(require_account)
):
    """Update profile fields, or the password when new_password is submitted"""
    result = await accounts.update_current_account(ctx, data)
    return render_outcome(result, response)

@router.get("/orders")
async def read_orders(page: int = 1, limit: int = 25, ctx: StoreContext = Depends(require_account)):
    """Get orders placed by the logged in account"""
    return await accounts.get_account_orders(ctx, page, limit) or {"results": []}

@router.get("/addresses")
async def read_addresses(ctx: StoreContext = Depends(require_account)):
    """Get saved addresses"""
    return await accounts.get_account_addresses(ctx) or {"results": []}

@router.get("/cards")
async def read_cards(ctx: StoreContext = Depends(require_account)):
    """Get saved cards"""
    return await accounts.get_account_cards(ctx) or {"results": []}

@router.post("/login")
async def login(
    response: Response,
    data: Dict[str, Any] = Body(...),
    ctx: StoreContext = Depends(get_store_context)
):
    """
    Login with email and password

    Status 400 when credentials are missing, 401 when they are wrong
    """
    result = await accounts.login(ctx, data)
    if result is None:
        response.status_code = 400
    elif result is False:
        response.status_code = 401
    return {"success": result}

@router.post("/logout")
async def logout(ctx: StoreContext = Depends(get_store_context)):
    """Logout of the current account"""
    await accounts.logout(ctx)
    return {"success": True}
