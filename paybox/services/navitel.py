"""
Navitel GPS vendor proxy.

The session hash lives in a ``TokenCache`` owned by the client. Any
rejection from the vendor drops the cached hash so the next call logs in
again; no retry happens within the failing call.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import httpx

from paybox.config import settings
from paybox.errors import ExternalServiceError, UpstreamTimeoutError
from paybox.schemas.gps import TrackingLink, Vehicle

logger = logging.getLogger(__name__)


class TokenCache:
    """A single value with an expiry instant."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._value: Optional[str] = None
        self._expires_at = 0.0

    def get(self) -> Optional[str]:
        if self._value is not None and self.clock() < self._expires_at:
            return self._value
        return None

    def set(self, value: str) -> None:
        self._value = value
        self._expires_at = self.clock() + self.ttl_seconds

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0


class NavitelClient:
    def __init__(
        self,
        base_url: str,
        login: str,
        password: str,
        public_host: str,
        cache: TokenCache,
        timeout: float = 20.0,
        link_hours: int = 6,
        transport: Optional[httpx.BaseTransport] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.base_url = base_url.rstrip("/")
        self.login = login
        self.password = password
        self.public_host = public_host.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.link_hours = link_hours
        self._transport = transport
        self._now = now

    @classmethod
    def from_settings(cls) -> "NavitelClient":
        return cls(
            base_url=settings.NAVITEL_API_BASE,
            login=settings.NAVITEL_LOGIN,
            password=settings.NAVITEL_PASSWORD,
            public_host=settings.NAVITEL_PUBLIC_HOST,
            cache=TokenCache(settings.NAVITEL_TOKEN_TTL_SECONDS),
            timeout=settings.NAVITEL_TIMEOUT_SECONDS,
            link_hours=settings.NAVITEL_LINK_HOURS,
        )

    # ── transport ────────────────────────────────────────────────────────
    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(f"{self.base_url}{path}", json=body)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError("The GPS service took too long to answer") from e
        except httpx.HTTPError as e:
            logger.error("Navitel request %s failed: %s", path, e)
            raise ExternalServiceError("Could not reach the GPS service") from e

        if response.status_code in (401, 403):
            self.cache.invalidate()
        if not response.is_success:
            logger.error("Navitel %s returned %s", path, response.status_code)
            raise ExternalServiceError(
                "The GPS service returned an error",
                detail={"upstream_status": response.status_code},
            )
        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError("The GPS service returned an invalid response") from e

    def _call(self, path: str, body: dict[str, Any], failure: str) -> dict[str, Any]:
        data = self._post(path, {**body, "hash": self.auth_hash()})
        if not data.get("success"):
            # Most often an expired hash
            self.cache.invalidate()
            message = (data.get("error") or {}).get("message") or failure
            logger.warning("Navitel %s rejected: %s", path, message)
            raise ExternalServiceError(message)
        return data

    def auth_hash(self) -> str:
        cached = self.cache.get()
        if cached:
            return cached

        data = self._post("/user/auth", {"login": self.login, "password": self.password})
        if not data.get("success") or data.get("type") != "authenticated":
            raise ExternalServiceError("Authentication with the GPS service failed")
        session_hash = data.get("hash")
        if not session_hash:
            logger.error("Navitel auth answered without a session hash")
            raise ExternalServiceError("Authentication with the GPS service failed")
        self.cache.set(session_hash)
        logger.info("Navitel session refreshed")
        return session_hash

    # ── operations ───────────────────────────────────────────────────────
    def link_url(self, link_hash: str) -> str:
        return f"{self.public_host}/ls/{link_hash}"

    def list_vehicles(self) -> list[Vehicle]:
        data = self._call("/tracker/list", {}, "Could not list vehicles")
        return [Vehicle(id=t["id"], label=t["label"]) for t in data.get("list", [])]

    def create_tracking_link(
        self, tracker_id: int, label: str, hours: Optional[int] = None
    ) -> TrackingLink:
        valid_from = self._now()
        valid_to = valid_from + timedelta(hours=hours or self.link_hours)
        body = {
            "id": None,
            "lifetime": {"from": valid_from.isoformat(), "to": valid_to.isoformat()},
            "description": f"Geoenlace de {label}",
            "trackers": [
                {
                    "alias": label,
                    "tracker_id": tracker_id,
                    "params": {"object_data": [], "sensor_ids": [], "state_fields": []},
                }
            ],
            "params": {
                "bounding_zone_ids": [],
                "bounding_mode": None,
                "place_ids": [],
                "zone_ids": [],
                "display_options": {
                    "map": "osm",
                    "autoscale": True,
                    "show_icons": True,
                    "show_driver_info": True,
                    "show_vehicle_info": True,
                    "trace_duration": None,
                },
            },
        }
        data = self._call("/tracker/location/link/create", body, "Could not create tracking link")
        link_hash = data.get("hash")
        return TrackingLink(
            id=data.get("id"),
            hash=link_hash,
            valid_from=valid_from.isoformat(),
            valid_to=valid_to.isoformat(),
            description=body["description"],
            enabled=True,
            url=self.link_url(link_hash) if link_hash else None,
        )

    def list_tracking_links(self) -> list[TrackingLink]:
        data = self._call("/tracker/location/link/list", {}, "Could not list tracking links")
        links = []
        for link in data.get("list", []):
            lifetime = link.get("lifetime") or {}
            links.append(
                TrackingLink(
                    id=link.get("id"),
                    hash=link.get("hash"),
                    valid_from=lifetime.get("from"),
                    valid_to=lifetime.get("to"),
                    description=link.get("description"),
                    enabled=link.get("enabled"),
                    created_at=link.get("create_date"),
                    trackers=link.get("trackers") or [],
                    url=self.link_url(link["hash"]) if link.get("hash") else None,
                )
            )
        return links
