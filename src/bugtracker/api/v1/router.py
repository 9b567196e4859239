from fastapi import APIRouter

from src.bugtracker.api.v1 import (
    activity,
    auth,
    bugs,
    comments,
    invitations,
    projects,
    test_cases,
    test_runs,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(invitations.router)
api_router.include_router(bugs.router)
api_router.include_router(test_cases.router)
api_router.include_router(test_runs.router)
api_router.include_router(comments.router)
api_router.include_router(activity.router)
