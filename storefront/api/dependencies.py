"""
Shared API dependencies
Builds the per-request store context from the visitor's session cookie
"""
from typing import Any, Dict, Union
import uuid

from fastapi import Depends, Request, Response
from pydantic import BaseModel

from storefront.config import settings
from storefront.commerce.account import require_login
from storefront.commerce.context import StoreContext
from storefront.commerce.models import Failed
from storefront.schema.client import SchemaClient, get_schema_client

def get_client() -> SchemaClient:
    return get_schema_client()

def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        httponly=True,
        samesite="lax"
    )

def carry_session_cookie(request: Request, response: Response) -> Response:
    """Re-issue a session cookie created during this request on a replacement response"""
    session_id = getattr(request.state, "issued_session_id", None)
    if session_id:
        set_session_cookie(response, session_id)
    return response

async def get_store_context(
    request: Request,
    response: Response,
    client: SchemaClient = Depends(get_client)
) -> StoreContext:
    """Create the store context for this request, issuing a session cookie if needed"""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.state.issued_session_id = session_id
        set_session_cookie(response, session_id)
    return StoreContext(client, session_id)

async def require_account(ctx: StoreContext = Depends(get_store_context)) -> StoreContext:
    """Store context for routes that need a logged in account"""
    await require_login(ctx)
    return ctx

def render_outcome(result: Union[BaseModel, Failed], response: Response) -> Dict[str, Any]:
    """Serialize a workflow result; failures are answered with 422"""
    if isinstance(result, Failed):
        response.status_code = 422
    return result.model_dump(exclude={"password"}, exclude_none=True)
