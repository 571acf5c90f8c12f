"""
Top-level router for version 1 of the API.

Aggregates the domain routers.  Paths are mounted at the application
root (``/users``, ``/groups``) because existing clients call them
without a version prefix.
"""

from fastapi import APIRouter

from .endpoints import groups, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(groups.router, prefix="/groups", tags=["groups"])
