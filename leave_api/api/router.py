"""
API router.

Aggregates the route modules. Paths are mounted at the root, with the
blog routes under ``/blogs``.
"""

from fastapi import APIRouter

from leave_api.api.routes import auth, blog, health, leave, upload, users

api_router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal Server Error"},
    }
)

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(leave.router)
api_router.include_router(upload.router)
api_router.include_router(blog.router)
