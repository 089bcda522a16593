"""
Account workflow
Account lookup, creation/merge by email, profile updates, login and logout
"""
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from storefront.config import settings
from storefront.commerce.context import StoreContext
from storefront.commerce.models import Account, Failed, FieldError, Session, load_record, parse_record
from storefront.commerce.validation import Group, validate_fields
from storefront.schema.client import has_errors

logger = logging.getLogger(__name__)

ACCOUNT_CREATE_FIELDS = [
    "type", "group", "first_name", "last_name", "name",
    "email", "password", "phone", "contacts"
]

ACCOUNT_PROFILE_FIELDS = ["first_name", "last_name", "name", "email", "phone"]

class LoginRequired(Exception):
    """Raised to halt a request that needs a logged in account"""

    def __init__(self, redirect: str):
        super().__init__(f"Login required, redirecting to {redirect}")
        self.redirect = redirect

async def find_account_by_email(ctx: StoreContext, email: Optional[str]) -> Optional[Account]:
    """Get an existing account by email, if any"""
    if not email:
        return None
    result = await ctx.get("/accounts/{email}", {"email": email})
    if not result or has_errors(result):
        return None
    return load_record(result, Account)

async def create_account(ctx: StoreContext, data: Mapping[str, Any]) -> Union[Account, Failed]:
    """
    Create a new account and log it in

    An account previously created without a password (e.g. by a guest checkout)
    is claimed and updated in place instead of creating a duplicate.

    Args:
        ctx: Current request context
        data: Submitted account fields; type "business" creates a wholesale account

    Returns:
        Account or Failed
    """
    data = dict(data)
    required_fields: List[str] = ["first_name", "last_name", "email", "password"]

    # Business accounts added to 'Wholesale' group, others are individual 'Customers'
    if data.get("type") == "business":
        data["group"] = "wholesale"
        data["contacts"] = [{
            "first_name": data.get("first_name"),
            "last_name": data.get("last_name"),
            "email": data.get("email")
        }]
        required_fields += ["name", "phone"]
    else:
        data["type"] = "individual"
        data["group"] = "customers"

    errors = validate_fields(data, required_fields)
    if errors:
        return Failed(errors=errors)

    create_update = {field: data.get(field) for field in ACCOUNT_CREATE_FIELDS}

    existing = await find_account_by_email(ctx, create_update["email"])
    if existing and not existing.password:
        logger.info("Claiming provisional account %s", existing.id)
        result = await ctx.put("/accounts/{id}", {"id": existing.id, **create_update})
    else:
        result = await ctx.post("/accounts", create_update)

    account = parse_record(result, Account)
    if isinstance(account, Failed):
        return account

    await ctx.put_session({"account_id": account.id})
    return account

async def update_current_account(ctx: StoreContext, data: Mapping[str, Any]) -> Union[Account, Failed]:
    """
    Update the logged in account

    Submitting new_password changes the password only; otherwise the profile
    fields are updated.
    """
    session = await require_login(ctx)

    if data.get("new_password") is not None:
        errors = validate_fields(data, ["new_password", "confirm_password"])
        if errors:
            return Failed(errors=errors)
        if data.get("new_password") != data.get("confirm_password"):
            return Failed(errors={
                "confirm_password": FieldError(message="Must match password", code="CONFIRM").model_dump()
            })
        result = await ctx.put("/accounts/{id}", {
            "id": session.account_id,
            "password": data["new_password"]
        })
        return parse_record(result, Account)

    fields = list(ACCOUNT_PROFILE_FIELDS)
    if data.get("type") == "business":
        fields.append("contacts")
        required_fields = [
            "name", "phone",
            Group("contacts", [Group("0", ["first_name", "last_name"])])
        ]
    else:
        required_fields = ["first_name", "last_name", "email"]

    errors = validate_fields(data, required_fields)
    if errors:
        return Failed(errors=errors)

    update: Dict[str, Any] = {"id": session.account_id}
    update.update({field: data[field] for field in fields if field in data})
    result = await ctx.put("/accounts/{id}", update)
    return parse_record(result, Account)

async def get_account(ctx: StoreContext) -> Optional[Account]:
    """Get current logged in account"""
    session = await ctx.get_session()
    if not session.account_id:
        return None
    result = await ctx.get("/accounts/{id}", {"id": session.account_id})
    if not result or has_errors(result):
        return None
    return load_record(result, Account)

async def get_account_orders(ctx: StoreContext, page: int = 1, limit: int = 25) -> Optional[Dict]:
    """Get orders placed by the current logged in account"""
    session = await ctx.get_session()
    if not session.account_id:
        return None
    return await ctx.get("/orders", {
        "account_id": session.account_id,
        "page": page,
        "limit": limit
    })

async def get_account_addresses(ctx: StoreContext) -> Optional[Dict]:
    """Get saved addresses for the current account, if logged in"""
    session = await ctx.get_session()
    if not session.account_id:
        return None
    return await ctx.get("/accounts/{id}/addresses", {"id": session.account_id})

async def get_account_cards(ctx: StoreContext) -> Optional[Dict]:
    """Get saved cards for the current account, if logged in"""
    session = await ctx.get_session()
    if not session.account_id:
        return None
    return await ctx.get("/accounts/{id}/cards", {"id": session.account_id})

async def login(ctx: StoreContext, data: Mapping[str, Any]) -> Optional[bool]:
    """
    Login to an account

    Returns:
        None if email or password was not submitted, False for bad credentials, True on success
    """
    if data.get("email") is None or data.get("password") is None:
        return None

    account = await ctx.get("/accounts/:login", {
        "email": data["email"],
        "password": data["password"]
    })

    if account and not has_errors(account) and account.get("id"):
        await ctx.put_session({"account_id": account["id"]})
        return True

    logger.info("Failed login attempt")
    return False

async def logout(ctx: StoreContext) -> None:
    """Logout of the current account"""
    session = await ctx.get_session()
    if session.account_id is not None:
        await ctx.put_session({"account_id": None})

async def require_login(ctx: StoreContext) -> Session:
    """
    Check session and halt with a redirect if not logged in

    Raises:
        LoginRequired: when the session has no account
    """
    session = await ctx.get_session()
    if not session.account_id:
        raise LoginRequired(settings.LOGIN_PATH)
    return session
