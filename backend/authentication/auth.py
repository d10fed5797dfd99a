import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    InsufficientPermissionsException,
    NotOwnerException,
    SessionExpiredException,
)
from repositories.database import get_db
from repositories.profile_repository import ProfileRepository

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    subject: uuid.UUID | str,
    claims: Optional[dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a token shaped like a Supabase access token.

    Used by tests and local tooling; production tokens come from Supabase.
    """
    to_encode: dict[str, Any] = dict(claims or {})
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    to_encode.update(
        {"sub": str(subject), "aud": settings.SUPABASE_JWT_AUDIENCE, "exp": expire}
    )
    return jwt.encode(
        to_encode,
        settings.SUPABASE_JWT_SECRET,
        algorithm=settings.SUPABASE_JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify an access token and return its claims.

    Raises:
        AuthenticationException: If the token is expired, tampered with or
            lacks a UUID subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise SessionExpiredException()
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Unauthorized")

    try:
        uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationException("Unauthorized")
    return payload


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header first, then the session cookie set by the web client."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE) or None


def get_or_create_profile(db: Session, claims: dict[str, Any]) -> db_models.Profile:
    """
    Load the caller's profile, creating it on first sign-in.

    Name and avatar come from the identity provider's user metadata. A
    concurrent first request may insert the row first; that row is returned.
    """
    user_id = uuid.UUID(str(claims["sub"]))
    repo = ProfileRepository(db)
    profile = repo.get_by_id(user_id)
    if profile is not None:
        return profile

    metadata = claims.get("user_metadata") or {}
    email = claims.get("email")
    name = metadata.get("full_name") or metadata.get("name")
    if not name and email:
        name = str(email).split("@")[0]

    profile = db_models.Profile(
        id=user_id,
        email=email,
        name=name,
        avatar_url=metadata.get("avatar_url") or metadata.get("picture"),
    )
    logger.info(f"Provisioning profile {user_id} on first sign-in")
    try:
        return repo.create(profile)
    except IntegrityError:
        repo.rollback()
        existing = repo.get_by_id(user_id)
        if existing is None:
            raise
        logger.info(f"Profile {user_id} was provisioned by a concurrent request")
        return existing


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> db_models.Profile:
    """
    Resolve the authenticated caller's profile.

    Runs on every request; nothing is cached between requests so role
    changes apply immediately.

    Raises:
        AuthenticationException: If no valid session is present.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationException("Unauthorized")
    claims = decode_access_token(token)
    return get_or_create_profile(db, claims)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[db_models.Profile]:
    """
    Get current user if authenticated, otherwise return None.

    An expired token still raises so the client knows to refresh it.
    Malformed tokens are treated as anonymous access.
    """
    token = _extract_token(request, credentials)
    if not token:
        return None
    try:
        claims = decode_access_token(token)
    except SessionExpiredException:
        raise
    except AuthenticationException:
        return None
    return get_or_create_profile(db, claims)


def require_roles(
    *roles: db_models.Role,
) -> Callable[..., Awaitable[db_models.Profile]]:
    """
    Build a dependency that only lets the given roles through.

    Example:
        @router.get("/admin/reports")
        def list_reports(user = Depends(require_roles(Role.MODERATOR, Role.ADMIN))):
            ...

    Raises:
        InsufficientPermissionsException: If the caller's role is not allowed.
    """
    allowed = frozenset(roles)

    async def role_gate(
        current_user: db_models.Profile = Depends(get_current_user),
    ) -> db_models.Profile:
        if current_user.role not in allowed:
            raise InsufficientPermissionsException("Forbidden")
        return current_user

    return role_gate


# Moderators and admins share every admin-scoped operation
get_staff_user = require_roles(db_models.Role.MODERATOR, db_models.Role.ADMIN)
get_admin_user = require_roles(db_models.Role.ADMIN)


def ensure_owner(
    author_id: uuid.UUID, actor_id: uuid.UUID, what: str = "content"
) -> None:
    """
    Ownership check for author-only mutations.

    Raises:
        NotOwnerException: If the actor did not author the content.
    """
    if author_id != actor_id:
        raise NotOwnerException(what)
