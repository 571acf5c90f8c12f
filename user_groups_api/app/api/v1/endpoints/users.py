"""
User endpoints for API v1.

Handlers validate the request shape, call ``UserService`` and turn
service errors into HTTP responses through ``http_error``.  Membership
routes live under ``/users/{user_id}/groups`` and are served by
``GroupService``.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Path, Query, status

from user_groups_api.app.core.db import MAX_SQLITE_INT
from user_groups_api.app.core.errors import ServiceError, ValidationError, http_error
from user_groups_api.app.schemas.common import Message
from user_groups_api.app.schemas.user import (
    UserCreate,
    UserEmailRead,
    UserEmailUpdate,
    UserRead,
    UserStatusUpdate,
)
from user_groups_api.app.services.group_service import GroupService
from user_groups_api.app.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(
    limit: int = Query(10, ge=0, le=MAX_SQLITE_INT),
    offset: int = Query(0, ge=0, le=MAX_SQLITE_INT),
) -> List[UserRead]:
    """Return a page of users in store order."""
    try:
        return await UserService.list_users(limit=limit, offset=offset)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve users")


@router.get("/filter", response_model=List[UserRead])
async def filter_users_by_name(name: str = Query(...)) -> List[UserRead]:
    """Return every user whose name equals ``name`` exactly."""
    try:
        if not name.strip():
            raise ValidationError("Invalid name query parameter")
        return await UserService.find_users_by_name(name)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve users by name")


@router.get("/filter/email", response_model=List[UserRead])
async def filter_users_by_email(email: str = Query(...)) -> List[UserRead]:
    try:
        if not email.strip():
            raise ValidationError("Invalid email query parameter")
        return await UserService.find_users_by_email(email)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve users by email")


# Registered after the ``/filter`` routes, which would otherwise be
# rejected as non-integer ids.
@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int = Path(..., ge=0, le=MAX_SQLITE_INT)) -> UserRead:
    try:
        user = await UserService.get_user(user_id)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve user")
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("", response_model=UserRead)
async def create_user(user: UserCreate) -> UserRead:
    """Create a user.  A duplicate email answers 409."""
    try:
        return await UserService.create_user(user.name, user.email)
    except ServiceError as exc:
        raise http_error(exc, "Failed to add user")


# Declared before the ``/{user_id}`` routes so that "statuses" is never
# parsed as a user id.
@router.put("/statuses", response_model=Message)
async def update_user_statuses(updates: List[UserStatusUpdate]) -> Message:
    """Set the status of several users atomically.

    The body is a non-empty JSON array of ``{"id": int, "status": str}``
    objects; unknown ids are ignored.
    """
    try:
        if not updates:
            raise ValidationError("Invalid request body. Must be an array of user status updates")
        await UserService.update_user_statuses(updates)
    except ServiceError as exc:
        raise http_error(exc, "Failed to update user statuses")
    return Message(message="User statuses updated successfully")


@router.put("/{user_id}/email", response_model=UserEmailRead)
async def update_user_email(
    body: UserEmailUpdate,
    user_id: int = Path(..., ge=0, le=MAX_SQLITE_INT),
) -> UserEmailRead:
    try:
        return await UserService.update_user_email(user_id, body.email)
    except ServiceError as exc:
        raise http_error(exc, "Failed to update user email")


@router.post("/{user_id}/groups/{group_id}", response_model=Message)
async def add_user_to_group(
    user_id: int = Path(..., ge=0, le=MAX_SQLITE_INT),
    group_id: int = Path(..., ge=0, le=MAX_SQLITE_INT),
) -> Message:
    try:
        await GroupService.add_user_to_group(user_id, group_id)
    except ServiceError as exc:
        raise http_error(exc, "Failed to add user to group")
    return Message(message="User added to group successfully")


@router.delete("/{user_id}/groups/{group_id}", response_model=Message)
async def remove_user_from_group(
    user_id: int = Path(..., ge=0, le=MAX_SQLITE_INT),
    group_id: int = Path(..., ge=0, le=MAX_SQLITE_INT),
) -> Message:
    """Remove a membership; the group is marked empty if nobody is left."""
    try:
        await GroupService.remove_user_from_group(user_id, group_id)
    except ServiceError as exc:
        raise http_error(exc, "Failed to remove user from group")
    return Message(message="User removed from group successfully")
