from fastapi import APIRouter

from floorline.api.v1.change_orders import router as change_orders_router
from floorline.api.v1.installers import router as installers_router
from floorline.api.v1.jobs import router as jobs_router
from floorline.api.v1.projects import router as projects_router
from floorline.api.v1.quotes import router as quotes_router

v1_router = APIRouter()

v1_router.include_router(projects_router)
v1_router.include_router(installers_router)
v1_router.include_router(quotes_router)
v1_router.include_router(change_orders_router)
v1_router.include_router(jobs_router)
