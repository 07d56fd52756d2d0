from fastapi import APIRouter

from app.api.v1.endpoints import influencers, imports, dashboard, users

api_router = APIRouter()

api_router.include_router(influencers.router, prefix="/influencers", tags=["influencers"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
