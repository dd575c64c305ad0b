"""
Process-wide external collaborators, overridable in tests.
"""
from functools import lru_cache

from paybox.pipeline.vision import VisionClient
from paybox.services.navitel import NavitelClient
from paybox.services.storage import BlobStore, MinioBlobStore


@lru_cache
def get_blob_store() -> BlobStore:
    return MinioBlobStore.from_settings()


@lru_cache
def get_vision_client() -> VisionClient:
    return VisionClient.from_settings()


@lru_cache
def get_navitel_client() -> NavitelClient:
    # One client per process so the session hash cache is shared
    return NavitelClient.from_settings()
