"""
Shared pytest fixtures — in‑memory SQLite + FastAPI TestClient.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import paybox.models  # noqa: F401  — register models
from paybox.config import settings
from paybox.database import Base, get_db
from paybox.dependencies import get_blob_store, get_navitel_client, get_vision_client
from paybox.main import app
from paybox.pipeline.vision import VisionClient
from paybox.services.navitel import NavitelClient, TokenCache
from paybox.services.storage import BlobStore

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


# ── fakes ────────────────────────────────────────────────────────────────

class FakeBlobStore(BlobStore):
    def __init__(self):
        self.uploaded: list[tuple[str, str]] = []
        self.deleted: list[str] = []

    def upload(self, data: bytes, content_type: str, extension: str) -> str:
        url = f"https://blob.test/comprobantes/receipts/{len(self.uploaded) + 1}.{extension}"
        self.uploaded.append((url, content_type))
        return url

    def delete(self, url: str) -> None:
        self.deleted.append(url)


def chat_reply(content: str, status: int = 200) -> httpx.Response:
    return httpx.Response(
        status,
        json={
            "choices": [{"message": {"role": "assistant", "content": content}}],
            "usage": {"prompt_tokens": 900, "completion_tokens": 80, "total_tokens": 980},
        },
    )


def make_vision_client(handler) -> VisionClient:
    return VisionClient(
        base_url="https://llm.test/v1",
        api_key="test-key",
        model="gpt-4o",
        transport=httpx.MockTransport(handler),
    )


class NavitelStub:
    """Scripted vendor: answers by path and records every request body."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.logins = 0
        self.routes: dict[str, object] = {
            "/user/auth": lambda body: {"success": True, "type": "authenticated", "hash": f"h{self.logins}"},
            "/tracker/list": lambda body: {
                "success": True,
                "list": [{"id": 101, "label": "ABC-123"}, {"id": 102, "label": "XYZ-789"}],
            },
            "/tracker/location/link/create": lambda body: {"success": True, "id": 55, "hash": "pub55"},
            "/tracker/location/link/list": lambda body: {"success": True, "list": []},
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api-v2")
        body = json.loads(request.content or b"{}")
        self.calls.append((path, body))
        if path == "/user/auth":
            self.logins += 1
        answer = self.routes[path](body)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)


def make_navitel_client(stub: NavitelStub, clock=None) -> NavitelClient:
    cache = TokenCache(1800, clock=clock) if clock else TokenCache(1800)
    return NavitelClient(
        base_url="https://navitel.test/api-v2",
        login="fleet",
        password="secret",
        public_host="https://control.navitelgps.com",
        cache=cache,
        transport=httpx.MockTransport(stub),
    )


# ── auth helpers ─────────────────────────────────────────────────────────

def make_token(sub: str, role: str = "user", email=None, full_name=None, permissions=None) -> str:
    claims = {
        "sub": sub,
        "email": email or f"{sub}@example.com",
        "app_metadata": {"role": role, "permissions": permissions or {}},
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth(sub: str, role: str = "user", **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, role, **kwargs)}"}


ALL_PERMS = {"can_create": True, "can_edit": True, "can_delete": True}


@pytest.fixture()
def admin_headers():
    return auth("admin-1", "admin", full_name="Ana Admin")


@pytest.fixture()
def user_headers():
    return auth("user-1", "user", full_name="Luis Perez", permissions=ALL_PERMS)


@pytest.fixture()
def viewer_headers():
    return auth("viewer-1", "viewer")


# ── app wiring ───────────────────────────────────────────────────────────

@pytest.fixture()
def blob_store():
    return FakeBlobStore()


@pytest.fixture()
def vision_replies():
    """Queue of reply strings served by the fake vision endpoint."""
    return []


@pytest.fixture()
def navitel_stub():
    return NavitelStub()


@pytest.fixture()
def client(db, blob_store, vision_replies, navitel_stub):
    def _override():
        try:
            yield db
        finally:
            pass

    def _vision(request: httpx.Request) -> httpx.Response:
        return chat_reply(vision_replies.pop(0))

    vision = make_vision_client(_vision)
    navitel = make_navitel_client(navitel_stub)

    app.dependency_overrides[get_db] = _override
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_vision_client] = lambda: vision
    app.dependency_overrides[get_navitel_client] = lambda: navitel
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
