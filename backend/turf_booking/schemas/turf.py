"""
Pydantic schemas for turf-related request/response validation.
"""

from pydantic import BaseModel, Field


class TurfCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    image_url: str = Field(..., min_length=1, max_length=1000)


class TurfOwner(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class TurfResponse(BaseModel):
    id: int
    name: str
    location: str
    image_url: str
    owner_id: int

    model_config = {"from_attributes": True}


class TurfListItem(TurfResponse):
    owner: TurfOwner
