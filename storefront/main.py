"""
Storefront - FastAPI Backend
Storefront helpers and checkout workflows on top of the Schema commerce API
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.config import settings, get_client_info
from storefront.api.dependencies import carry_session_cookie
from storefront.commerce.account import LoginRequired
from storefront.schema.client import SchemaApiError, close_schema_client
from storefront.api.account import router as account_router
from storefront.api.cart import router as cart_router
from storefront.api.checkout import router as checkout_router
from storefront.api.leads import router as leads_router
from storefront.api.products import router as products_router

logging.basicConfig(
    level=settings.LOG_LEVEL.value,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_schema_client()

app = FastAPI(
    title="Storefront API",
    description="Storefront helpers and checkout workflows for the Schema commerce platform",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(account_router)
app.include_router(leads_router)

@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Send visitors without an account session to the login page"""
    return carry_session_cookie(request, RedirectResponse(exc.redirect, status_code=303))

@app.exception_handler(SchemaApiError)
async def schema_api_error_handler(request: Request, exc: SchemaApiError):
    """Commerce API failures are reported as a bad gateway"""
    logger.error("Schema API error on %s %s: %s", request.method, request.url.path, exc.message)
    response = JSONResponse(
        status_code=502,
        content={"detail": "Commerce service unavailable", "upstream_status": exc.status_code}
    )
    return carry_session_cookie(request, response)

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "status": "ready",
        "features": [
            "Product & Category Browsing",
            "Session Cart",
            "Shipping -> Billing -> Order Checkout",
            "Account Registration & Login",
        ],
    }

@app.get("/health")
async def health_check():
    """Health check endpoint - simple and fast"""
    return {
        "status": "healthy",
        "schema": get_client_info()
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
