"""Pydantic schemas for category endpoints."""

from datetime import datetime

from pydantic import BaseModel


class CategoryCreateRequest(BaseModel):
    name: str


class CategoryResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}
