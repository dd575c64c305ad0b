"""
System update (announcement) schemas
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UpdateCategory(str, Enum):
    FEATURE = "feature"
    BUGFIX = "bugfix"
    IMPROVEMENT = "improvement"
    GENERAL = "general"


class SystemUpdateCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    version: Optional[str] = None
    category: UpdateCategory = UpdateCategory.GENERAL


class SystemUpdateResponse(BaseModel):
    id: str
    title: str
    description: str
    version: Optional[str] = None
    category: UpdateCategory
    created_by: Optional[str] = None
    created_at: datetime
    viewed: bool = False
