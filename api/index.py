"""
Thermal Club - Main FastAPI Application

Single entry point for member, cart, navigation and admin API routes.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from thermal.errors import ERROR_INTERNAL
from thermal.logging import get_logger
from thermal.routers.admin import router as admin_router
from thermal.routers.auth import router as auth_router
from thermal.routers.cart import router as cart_router
from thermal.routers.member import router as member_router
from thermal.routers.navigation import router as navigation_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("Thermal Club API starting")
    yield
    logger.info("Thermal Club API shutting down")


app = FastAPI(
    title="Thermal Club",
    description="Membership, cart and check-in API for the thermal wellness club",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api/auth")
app.include_router(cart_router, prefix="/api")
app.include_router(navigation_router, prefix="/api")
app.include_router(member_router, prefix="/api")
app.include_router(admin_router, prefix="/api/admin")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": ERROR_INTERNAL})


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
