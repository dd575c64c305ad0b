"""
GPS vendor proxy schemas
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class Vehicle(BaseModel):
    id: int
    label: str


class VehicleList(BaseModel):
    success: bool = True
    vehicles: list[Vehicle]
    count: int


class TrackingLinkCreate(BaseModel):
    tracker_id: int
    label: str = Field(..., min_length=1)


class TrackingLink(BaseModel):
    id: Optional[int] = None
    hash: Optional[str] = None
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None
    description: Optional[str] = None
    enabled: Optional[bool] = None
    created_at: Optional[str] = None
    trackers: list[dict[str, Any]] = Field(default_factory=list)
    url: Optional[str] = None


class TrackingLinkList(BaseModel):
    success: bool = True
    links: list[TrackingLink]
    count: int
