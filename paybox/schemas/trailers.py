"""
Trailer service schemas
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LookupKind(str, Enum):
    CLIENT = "client"
    TRAILER = "trailer"
    DRIVER = "driver"
    LOCATION = "location"


class LookupCreate(BaseModel):
    name: str = Field(..., min_length=1)


class LookupResponse(BaseModel):
    id: int
    kind: LookupKind
    name: str


class TrailerServiceBase(BaseModel):
    service_date: str = Field(..., min_length=1)
    dispatch_guide: Optional[str] = None
    carrier_guide: Optional[str] = None
    plate: Optional[str] = None
    trailer_id: Optional[int] = None
    client_id: Optional[int] = None
    sub_client_id: Optional[int] = None
    service_type: Optional[str] = None
    cargo_type: Optional[str] = None
    appointment_time: Optional[str] = None
    reference: Optional[str] = None
    container_size: Optional[str] = None
    agency_id: Optional[int] = None
    pickup_warehouse_id: Optional[int] = None
    destination_id: Optional[int] = None
    container: Optional[str] = None
    return_warehouse_id: Optional[int] = None
    driver_id: Optional[int] = None
    status: Optional[str] = None
    empty_return: Optional[str] = None
    return_driver_id: Optional[int] = None
    return_time: Optional[str] = None
    pickup_arrival: Optional[str] = None
    pickup_departure: Optional[str] = None
    client_arrival: Optional[str] = None
    plant_entry: Optional[str] = None
    loading_start: Optional[str] = None
    unloading_end: Optional[str] = None
    observations: Optional[str] = None
    yellow_line: Optional[float] = None
    tolls: Optional[float] = None
    extras: Optional[float] = None
    driver_pay: Optional[float] = None
    invoice: Optional[str] = None
    invoice_status: Optional[str] = None


class TrailerServiceCreate(TrailerServiceBase):
    pass


class TrailerServiceResponse(TrailerServiceBase):
    id: int
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None
