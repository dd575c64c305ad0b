"""
GPS vendor proxy endpoints.

GET  /api/gps/vehicles   — vehicles visible to the account
GET  /api/gps/links      — existing public tracking links
POST /api/gps/links      — create a temporary public tracking link
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from paybox.auth import CurrentUser, get_current_user
from paybox.dependencies import get_navitel_client
from paybox.schemas.gps import (
    TrackingLink,
    TrackingLinkCreate,
    TrackingLinkList,
    VehicleList,
)
from paybox.services.navitel import NavitelClient

router = APIRouter()


# ── GET /api/gps/vehicles ────────────────────────────────────────────────
@router.get("/gps/vehicles", response_model=VehicleList)
def list_vehicles(
    user: CurrentUser = Depends(get_current_user),
    client: NavitelClient = Depends(get_navitel_client),
):
    vehicles = client.list_vehicles()
    return VehicleList(vehicles=vehicles, count=len(vehicles))


# ── GET /api/gps/links ───────────────────────────────────────────────────
@router.get("/gps/links", response_model=TrackingLinkList)
def list_links(
    user: CurrentUser = Depends(get_current_user),
    client: NavitelClient = Depends(get_navitel_client),
):
    links = client.list_tracking_links()
    return TrackingLinkList(links=links, count=len(links))


# ── POST /api/gps/links ──────────────────────────────────────────────────
@router.post("/gps/links", response_model=TrackingLink)
def create_link(
    req: TrackingLinkCreate,
    user: CurrentUser = Depends(get_current_user),
    client: NavitelClient = Depends(get_navitel_client),
):
    return client.create_tracking_link(req.tracker_id, req.label)
