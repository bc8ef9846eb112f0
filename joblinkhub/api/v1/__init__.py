"""API v1 routes."""

from fastapi import APIRouter, Depends

from joblinkhub.api.v1 import profiles, records, users
from joblinkhub.core.rate_limit import enforce_rate_limit

api_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

# Include all route modules
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(records.router, prefix="/records", tags=["Records"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
