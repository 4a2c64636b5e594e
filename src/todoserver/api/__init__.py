"""API route aggregation.

All routers registered here get mounted in main.py.

Auth is applied at the include_router level using FastAPI's dependencies
parameter, so no task route can be added without the gate. Handlers that
need the identity declare the same dependency; FastAPI resolves it once
per request. The auth router is open, except /me and /logout which ask
for the identity themselves.
"""

from fastapi import APIRouter, Depends

from todoserver.api.auth import router as auth_router
from todoserver.api.tasks import router as tasks_router
from todoserver.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_auth)
