from fastapi import APIRouter

from siteflow.api.routes import cashflow, dashboard, exports, health, mappings, projects, settings


api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(projects.router)
api_router.include_router(cashflow.router)
api_router.include_router(exports.router)
api_router.include_router(dashboard.router)
api_router.include_router(mappings.router)
api_router.include_router(settings.router)
