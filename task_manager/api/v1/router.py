from fastapi import APIRouter

from task_manager.api.routers import auth, tasks, users

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(tasks.router)
