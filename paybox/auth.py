"""
Session authentication.

The identity provider issues HS256 JWTs; ``sub`` is the user id and the role
travels in ``app_metadata.role``. The profile row is the source of truth once
it exists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from paybox.config import settings
from paybox.database import get_db
from paybox.dates import utcnow
from paybox.errors import AuthenticationError
from paybox.models import UserProfileModel
from paybox.schemas import Permissions, Role
from paybox.services.permissions import effective_permissions, is_privileged, parse_role

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    email: str
    full_name: Optional[str]
    role: Role
    stored: Permissions

    @property
    def permissions(self) -> Permissions:
        return effective_permissions(self.role, self.stored)

    @property
    def privileged(self) -> bool:
        return is_privileged(self.role)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise AuthenticationError("Invalid or expired session") from e


def stored_permissions(profile: UserProfileModel) -> Permissions:
    return Permissions(
        can_create=bool(profile.can_create),
        can_edit=bool(profile.can_edit),
        can_delete=bool(profile.can_delete),
    )


def _profile_from_claims(claims: dict) -> UserProfileModel:
    app_metadata = claims.get("app_metadata") or {}
    user_metadata = claims.get("user_metadata") or {}
    perms = app_metadata.get("permissions") or {}
    return UserProfileModel(
        id=claims["sub"],
        email=claims.get("email") or claims["sub"],
        full_name=user_metadata.get("full_name"),
        role=parse_role(app_metadata.get("role") or claims.get("role")).value,
        can_create=bool(perms.get("can_create", False)),
        can_edit=bool(perms.get("can_edit", False)),
        can_delete=bool(perms.get("can_delete", False)),
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if credentials is None:
        raise AuthenticationError("Missing Authorization header")
    claims = decode_token(credentials.credentials)
    if not claims.get("sub"):
        raise AuthenticationError("Session has no subject")

    profile = db.query(UserProfileModel).filter(UserProfileModel.id == claims["sub"]).first()
    if profile is None:
        profile = _profile_from_claims(claims)
        db.add(profile)
        logger.info("Provisioned profile %s (%s)", profile.id, profile.role)
    profile.last_sign_in_at = utcnow()
    db.commit()

    return CurrentUser(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=parse_role(profile.role),
        stored=stored_permissions(profile),
    )
