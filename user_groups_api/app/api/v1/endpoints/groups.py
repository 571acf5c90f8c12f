"""Group endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Path, Query

from user_groups_api.app.core.db import MAX_SQLITE_INT
from user_groups_api.app.core.errors import ServiceError, http_error
from user_groups_api.app.schemas.group import GroupCreate, GroupRead
from user_groups_api.app.schemas.user import UserRead
from user_groups_api.app.services.group_service import GroupService

router = APIRouter()


@router.post("", response_model=GroupRead)
async def create_group(group: GroupCreate) -> GroupRead:
    try:
        return await GroupService.create_group(group.name)
    except ServiceError as exc:
        raise http_error(exc, "Failed to add group")


@router.get("", response_model=List[GroupRead])
async def list_groups(
    limit: int = Query(10, ge=0, le=MAX_SQLITE_INT),
    offset: int = Query(0, ge=0, le=MAX_SQLITE_INT),
) -> List[GroupRead]:
    try:
        return await GroupService.list_groups(limit=limit, offset=offset)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve groups")


@router.get("/{group_id}", response_model=GroupRead)
async def get_group(group_id: int = Path(..., ge=0, le=MAX_SQLITE_INT)) -> GroupRead:
    """Return one group.  Its ``status`` reflects the last recorded removal."""
    try:
        return await GroupService.get_group(group_id)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve group")


@router.get("/{group_id}/users", response_model=List[UserRead])
async def list_group_members(group_id: int = Path(..., ge=0, le=MAX_SQLITE_INT)) -> List[UserRead]:
    try:
        return await GroupService.list_group_members(group_id)
    except ServiceError as exc:
        raise http_error(exc, "Failed to retrieve group members")
