"""Pydantic models for group payloads."""

from pydantic import BaseModel, Field, validator

from ..core.statuses import GroupStatus


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, example="editors")

    @validator("name")
    def check_not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class GroupRead(BaseModel):
    """A group row.  ``status`` is a cached value, see ``GroupService``."""

    id: int
    name: str
    status: GroupStatus

    model_config = {
        "from_attributes": True,
    }
