# eventhub/api/v1/api.py

from fastapi import APIRouter

from eventhub.api.v1.endpoints import (
    admin,
    cron,
    host,
    payments,
    public,
    registrations,
    webhooks,
)

# This is the main router for the v1 API.
api_router = APIRouter()

api_router.include_router(public.router)
api_router.include_router(registrations.router)
api_router.include_router(payments.router)
api_router.include_router(webhooks.router)
api_router.include_router(host.router)
api_router.include_router(admin.router)
api_router.include_router(cron.router)
