"""API router registration."""

from fastapi import APIRouter

from mykahfi_portal.api.routes import auth, dashboard, messages, push, webhooks

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(dashboard.router)
api_router.include_router(messages.router)
api_router.include_router(webhooks.router)
api_router.include_router(push.router)
